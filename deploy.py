"""
TourSecureDigitalID Deployment
Deploys the contract with the first configured signer as its owner

Usage:
    python deploy.py
    DEPLOY_NETWORK=sepolia python deploy.py
"""

import os
import sys
from loguru import logger
from dotenv import find_dotenv, load_dotenv

from blockchain.exceptions import DeploymentError
from deployer.config import load_config
from deployer.deployment_runner import create_runner


def configure_logging():
    """Send logs to stderr (and LOG_FILE if set); stdout is reserved for the report"""
    logger.remove()
    logger.add(
        sys.stderr,
        format="<green>{time:YYYY-MM-DD HH:mm:ss}</green> | <level>{level: <8}</level> | <cyan>{name}</cyan>:<cyan>{function}</cyan> - <level>{message}</level>",
        level=os.getenv('LOG_LEVEL', 'INFO')
    )

    log_file = os.getenv('LOG_FILE')
    if log_file:
        logger.add(
            log_file,
            rotation="1 day",
            retention="7 days",
            format="{time:YYYY-MM-DD HH:mm:ss} | {level: <8} | {name}:{function} - {message}",
            level="DEBUG"
        )


def main() -> int:
    """
    Run one deployment

    Returns:
        Process exit code (0 on success)
    """
    try:
        config = load_config()
        logger.info(f"Deploying {config.contract_name} to {config.network_name}")

        runner = create_runner(config)
        runner.run()

    except DeploymentError as e:
        logger.error(f"{type(e).__name__}: {e}")
        return 1
    except KeyboardInterrupt:
        # A submitted transaction may still be mined
        logger.warning("Interrupted - any submitted transaction is left to the network")
        return 130
    except Exception as e:
        logger.opt(exception=e).error(f"Deployment failed: {e}")
        return 1

    return 0


def run():
    """Console script entry point"""
    # LOG_LEVEL and LOG_FILE may come from .env
    load_dotenv(find_dotenv(usecwd=True))
    configure_logging()
    sys.exit(main())


if __name__ == "__main__":
    run()
