import logging
import sys

# 1. Set up a handler and formatter (e.g., for console output)
# This handler will be used by all loggers that don't have their own handlers.
console_handler = logging.StreamHandler(sys.stdout)
console_handler.setLevel(logging.DEBUG)
formatter = logging.Formatter(
    "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
)
console_handler.setFormatter(formatter)

# 2. Application loggers (using __name__) inherit from the package logger.
package_logger = logging.getLogger(__name__)
package_logger.setLevel(logging.INFO)
package_logger.addHandler(console_handler)

# 3. Quiet the plotting stack
logging.getLogger("matplotlib").setLevel(logging.WARNING)
logging.getLogger("PIL").setLevel(logging.WARNING)
