"""Domain initialization and configuration."""

from protean.domain import Domain

from catalog.utils.logging import configure_logging, get_logger

# Configure logging for the application
configure_logging(log_dir="logs", log_file_prefix="catalog")

# Get logger for this module
logger = get_logger(__name__)

# Domain Composition Root
catalog = Domain(name="catalog")
