"""Entry point for the DBEN application."""

import os
import sys

from logging_config import setup_logging, silence_noisy_loggers

logger = setup_logging("web_app", log_file=os.getenv('LOG_FILE') or None)
silence_noisy_loggers()

from app import app, serve  # noqa: E402  (logging must be configured first)
from dben.models import ConfigurationError, load_platform_config  # noqa: E402


def check_configuration() -> bool:
    """Fail fast when the hosted platform settings are missing."""
    try:
        config = load_platform_config()
    except ConfigurationError as e:
        logger.error(f"{e}. Set them in the environment or a .env file.")
        return False
    logger.info(f"Using platform at {config.url}")
    return True


def main():
    """Start the DBEN FastHTML application."""
    print("=" * 60)
    print("Starting DBEN - Decentralized Book Exchange Network")
    print("=" * 60)

    if not check_configuration():
        sys.exit(1)

    port = int(os.getenv('PORT', '5001'))
    print(f"🌐 Starting web application on http://localhost:{port}")
    print("=" * 60)

    try:
        serve(port=port)
    except KeyboardInterrupt:
        print("\n🛑 Application interrupted by user")
    except Exception as e:
        logger.error(f"Application error: {e}", exc_info=True)
        raise


if __name__ == "__main__":
    main()
