"""
Deploy helper — verifies the trap is importable, configured, and pointed at
a live token before deploying. Run this locally to catch issues early.

Usage:
    python -m scripts.deploy --check
"""
import sys


def check_imports():
    """Verify the trap modules import cleanly."""
    print("Checking imports...")
    errors = []

    modules = [
        ("Balance Trap API", "agents.balance_trap.main"),
        ("Decider", "agents.balance_trap.services.decider"),
        ("Collector", "agents.balance_trap.services.collector"),
    ]

    for name, module_path in modules:
        try:
            __import__(module_path)
            print(f"  {name:20s} OK")
        except Exception as e:
            print(f"  {name:20s} FAILED: {e}")
            errors.append((name, str(e)))

    return errors


def check_config():
    """Validate the trap settings as the app would load them."""
    print("\nChecking configuration...")
    from shared.config import settings
    from agents.balance_trap.errors import ConfigurationError
    from agents.balance_trap.services.trap import config_from_settings

    try:
        config = config_from_settings(settings)
    except ConfigurationError as e:
        print(f"  Trap config: INVALID ({e})")
        return None

    print(f"  Variant:            {config.variant}")
    print(f"  Tracked address:    {config.tracked_address}")
    print(f"  Token address:      {config.token_address}")
    print(f"  Absolute threshold: {config.absolute_threshold}")
    print(f"  Relative (bps):     {config.relative_threshold_bps if config.uses_relative_rule else 'off'}")
    print(f"  Guardian:           {config.guardian or 'none (ungated)'}")

    if settings.API_SECRET_KEY == "dev-secret-key":
        print("  API_SECRET_KEY      MISSING (still the dev default)")
        return None
    return config


def check_blockchain(config):
    """Verify RPC connectivity and that the token has code."""
    print("\nChecking blockchain...")
    from shared.config import settings
    from shared.contracts import ERC20Contract
    from shared.web3_client import w3

    try:
        block = w3.eth.block_number
        chain_id = w3.eth.chain_id
        print(f"  RPC: CONNECTED (block {block:,}, chain {chain_id})")
    except Exception as e:
        print(f"  RPC: FAILED ({e})")
        return False

    if chain_id != settings.CHAIN_ID:
        print(f"  Chain: MISMATCH (expected {settings.CHAIN_ID}, got {chain_id})")
        return False

    if config is None:
        return False

    token = ERC20Contract(config.token_address)
    try:
        if token.has_code():
            print(f"  Token: DEPLOYED ({token.symbol()})")
        else:
            # The resilient collector tolerates this, the strict one does not
            print("  Token: NO CODE at configured address")
            return config.variant == "resilient"
    except Exception as e:
        print(f"  Token: FAILED ({e})")
        return False
    return True


def main():
    print("=" * 50)
    print("Balance Trap Deployment Check")
    print("=" * 50)

    errors = check_imports()
    config = check_config()
    chain_ok = check_blockchain(config)

    print("\n" + "=" * 50)
    print("RESULTS:")
    print(f"  Imports:    {'PASS' if not errors else f'FAIL ({len(errors)} errors)'}")
    print(f"  Config:     {'PASS' if config else 'FAIL'}")
    print(f"  Blockchain: {'PASS' if chain_ok else 'FAIL'}")

    if errors or not config or not chain_ok:
        print("\nFix issues before deploying.")
        sys.exit(1)
    print("\nReady to deploy!")
    print("\n  uvicorn agents.balance_trap.main:app --host 0.0.0.0 --port 8010")


if __name__ == "__main__":
    main()
