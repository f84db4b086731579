"""MCP server exposing spec mirror setup over stdio."""

import logging
import sys

from mcp.server.fastmcp import FastMCP

from .config import Config, load_configuration, validate_configuration
from .errors import error_handler


def setup_logging(config: Config) -> None:
    """Setup logging with structured operation prefixes on stderr."""
    class StructuredFormatter(logging.Formatter):
        def format(self, record):
            if hasattr(record, 'operation'):
                record.msg = f"[{record.operation}] {record.msg}"
            return super().format(record)

    handler = logging.StreamHandler(sys.stderr)
    handler.setFormatter(StructuredFormatter(
        '%(asctime)s - %(name)s - %(levelname)s - %(message)s',
        datefmt='%Y-%m-%d %H:%M:%S'
    ))

    logger = logging.getLogger('specmirror')
    logger.setLevel(getattr(logging, config.log_level))
    logger.handlers.clear()
    logger.addHandler(handler)
    logger.propagate = False


def run_setup(config: Config, push: bool = False, no_shallow: bool = False) -> dict:
    """Run a setup and return the outcome, or a structured error, as a dictionary."""
    from .mirror_setup import MirrorSetupManager

    try:
        outcome = MirrorSetupManager(config).run(push=push, no_shallow=no_shallow)
    except Exception as e:
        return error_handler.handle_setup_error(e, {'mirror_dir': str(config.mirror_dir)}).to_dict()
    return outcome.to_dict()


def register_tools(server: FastMCP, server_config: Config) -> None:
    """Register MCP tools with the server instance."""

    @server.tool()
    def setup_mirror(push: bool = False, no_shallow: bool = False) -> dict:
        """
        Create or refresh the local spec mirror.

        Clones the canonical spec repository into the spec repos directory,
        migrates mirrors left in the old directory layout, or brings an
        existing mirror up to date.

        Args:
            push: Use the push URL so the mirror can push once access is granted
            no_shallow: Clone the full history even in read-only mode

        Returns:
            Dictionary with the action taken and the access mode, or an error
        """
        return run_setup(server_config, push=push, no_shallow=no_shallow)

    @server.tool()
    def mirror_status() -> dict:
        """
        Report the layout and access mode of the local spec mirror without changing it.

        Returns:
            Dictionary with state, mode, mirror_dir and remote_url
        """
        from .mirror_setup import MirrorSetupManager

        return MirrorSetupManager(server_config).get_status()

    logging.getLogger('specmirror.init').info("MCP tools registered successfully")


def initialize_server() -> FastMCP:
    """Initialize MCP server with stdio transport."""
    server_config = load_configuration()
    setup_logging(server_config)
    init_logger = logging.getLogger('specmirror.init')

    validation_issues = validate_configuration(server_config)
    for issue in validation_issues:
        if issue.startswith("ERROR:"):
            init_logger.error(issue[7:])
        elif issue.startswith("WARNING:"):
            init_logger.warning(issue[9:])

    error_count = sum(1 for issue in validation_issues if issue.startswith("ERROR:"))
    if error_count > 0:
        init_logger.critical(f"Server startup failed due to {error_count} configuration error(s)")
        sys.exit(1)

    server = FastMCP(
        "Spec Mirror",
        log_level=server_config.log_level
    )
    register_tools(server, server_config)

    init_logger.info("Spec mirror MCP server initialized successfully")
    return server


def main():
    """Entry point for the MCP server with stdio transport."""
    try:
        server = initialize_server()
        server.run(transport="stdio")
    except KeyboardInterrupt:
        logging.getLogger('specmirror.init').info("Server stopped by user (Ctrl+C)")
