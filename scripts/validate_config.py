#!/usr/bin/env python3
"""Configuration validation script."""

import sys
from pathlib import Path

# Add the project root to the Python path
project_root = Path(__file__).parent.parent
sys.path.insert(0, str(project_root))

from cryptomon.config.loader import ConfigLoader
from cryptomon.config.validation import ConfigValidator
from cryptomon.errors import ConfigurationError


def main():
    """Main validation function."""
    config_dir = Path(sys.argv[1]) if len(sys.argv) > 1 else None
    loader = ConfigLoader.create(config_dir)
    print(f"🔍 Validating configuration in {loader.config_dir}...")

    try:
        merged = loader.merge_config()
    except ConfigurationError as e:
        print(f"❌ {e}")
        sys.exit(1)

    errors = ConfigValidator.validate_config(merged)
    if errors:
        print(f"❌ Found {len(errors)} validation errors:")
        for error in errors:
            print(f"  • {error.field}: {error.message} (value: {error.value})")
        sys.exit(1)

    try:
        config = loader.build_config()
    except ConfigurationError as e:
        print(f"❌ {e}")
        sys.exit(1)

    print(f"✅ Configuration is valid (history source: {config.market_data.history_source})")
    sys.exit(0)


if __name__ == "__main__":
    main()
