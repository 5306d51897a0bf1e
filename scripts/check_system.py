"""
System Check Script
Verifies configuration, artifact, network and signer before deploying

Nothing is submitted to the network.

Usage:
    python -m scripts.check_system
"""

import sys
from loguru import logger

from blockchain.contract_manager import ContractManager
from blockchain.exceptions import DeploymentError
from blockchain.transaction_builder import get_constructor_inputs
from blockchain.wallet_manager import WalletManager
from deployer.config import load_config
from utils.rpc_manager import RPCManager


def check_configuration(state: dict) -> bool:
    """Check that configuration loads and the network is known"""
    logger.info("Checking configuration...")

    config = load_config()
    state['config'] = config

    logger.success(f"  ✓ Contract: {config.contract_name}")
    logger.success(f"  ✓ Network: {config.network_name}")
    logger.info(f"  Confirmation timeout: {config.confirmation_timeout}s")
    return True


def check_artifact(state: dict) -> bool:
    """Check that the contract artifact resolves and is deployable"""
    logger.info("Checking contract artifact...")

    config = state.get('config')
    if config is None:
        logger.warning("  Skipped (no configuration)")
        return False

    artifact = ContractManager(None, config.artifacts_dir, None).get_artifact(config.contract_name)
    inputs = get_constructor_inputs(artifact.abi)

    logger.success(f"  ✓ {artifact.fully_qualified_name} ({artifact.path})")

    if len(inputs) != 1 or inputs[0].get('type') != 'address':
        logger.error(
            f"  ✗ Constructor takes ({', '.join(i.get('type', '?') for i in inputs)}), "
            f"expected a single owner address"
        )
        return False

    logger.success("  ✓ Constructor takes an owner address")
    return True


def check_rpc_connection(state: dict) -> bool:
    """Check RPC endpoint connection"""
    logger.info("Checking RPC connection...")

    config = state.get('config')
    if config is None:
        logger.warning("  Skipped (no configuration)")
        return False

    w3 = RPCManager(config).get_web3()
    state['w3'] = w3

    logger.success(f"  ✓ Connected (Block: {w3.eth.block_number})")
    return True


def check_signer(state: dict) -> bool:
    """Check that a signer exists and can pay for gas"""
    logger.info("Checking signer...")

    config = state.get('config')
    w3 = state.get('w3')
    if config is None or w3 is None:
        logger.warning("  Skipped (no network connection)")
        return False

    wallet_manager = WalletManager(w3, accounts_env=config.accounts_env)
    signers = wallet_manager.get_signers()

    if not signers:
        source = config.accounts_env or 'node accounts'
        logger.error(f"  ✗ No signer available ({source})")
        return False

    deployer = signers[0]
    balance = wallet_manager.get_balance(deployer.address)
    logger.info(f"  Deployer: {deployer.address} ({balance:.4f} ETH)")

    if balance <= 0:
        logger.error("  ✗ Deployer has no funds for gas")
        return False

    logger.success("  ✓ Deployer funded")
    return True


def main() -> int:
    """Run all system checks"""
    logger.info("=" * 70)
    logger.info("Deployment System Check")
    logger.info("=" * 70)

    checks = [
        ("Configuration", check_configuration),
        ("Contract Artifact", check_artifact),
        ("RPC Connection", check_rpc_connection),
        ("Signer", check_signer)
    ]

    state = {}
    results = []

    for name, check_func in checks:
        logger.info("")
        try:
            result = check_func(state)
        except DeploymentError as e:
            logger.error(f"  ✗ {type(e).__name__}: {e}")
            result = False
        except Exception as e:
            logger.error(f"Error in {name}: {e}")
            result = False
        results.append((name, result))

    # Summary
    logger.info("")
    logger.info("=" * 70)
    logger.info("Summary")
    logger.info("=" * 70)

    passed = sum(1 for _, result in results if result)
    total = len(results)

    for name, result in results:
        status = "✓ PASS" if result else "✗ FAIL"
        logger.info(f"  {status}: {name}")

    logger.info("")
    logger.info(f"Total: {passed}/{total} checks passed")

    if passed == total:
        logger.success("✅ Ready to deploy: python deploy.py")
        return 0

    logger.error("❌ Not ready - fix issues above")
    return 1


if __name__ == "__main__":
    sys.exit(main())
