#!/usr/bin/env python3
"""Configuration validation script."""

import sys
from pathlib import Path
from typing import List

# Add the project root to the Python path
project_root = Path(__file__).parent.parent
sys.path.insert(0, str(project_root))

from crm_analytics.config.loader import ConfigLoader
from crm_analytics.config.validation import ConfigValidator, ValidationError


def validate_profile_config(loader: ConfigLoader, profile_id: str) -> List[ValidationError]:
    """Validate the merged configuration of one brokerage profile."""
    config = loader.merge_config(profile_id)
    return ConfigValidator.validate_config(config)


def main():
    """Main validation function."""
    print("🔍 Validating CRM analytics configuration...")

    loader = ConfigLoader.create()

    # Every declared profile, plus an unknown one that should fall back to defaults
    profiles = loader.list_profiles() + ["unknown-profile"]

    all_valid = True

    for profile_id in profiles:
        print(f"\n📊 Validating {profile_id}...")

        try:
            errors = validate_profile_config(loader, profile_id)

            if errors:
                print(f"❌ Found {len(errors)} validation errors:")
                for error in errors:
                    print(f"  • {error.field}: {error.message} (value: {error.value})")
                all_valid = False
            else:
                print(f"✅ {profile_id} configuration is valid")

        except Exception as e:
            print(f"❌ Error validating {profile_id}: {e}")
            all_valid = False

    # Test per-call overrides
    print(f"\n📋 Testing per-call overrides...")
    test_overrides = {
        "window": {"default_period": "1y"},
        "aggregation": {"top_n": 10},
    }

    try:
        config = loader.merge_config(profiles[0], test_overrides)
        errors = ConfigValidator.validate_config(config)

        if errors:
            print(f"❌ Override validation failed:")
            for error in errors:
                print(f"  • {error.field}: {error.message}")
            all_valid = False
        else:
            print(f"✅ Override validation passed")

    except Exception as e:
        print(f"❌ Error testing overrides: {e}")
        all_valid = False

    if all_valid:
        print(f"\n🎉 All configuration validation passed!")
        sys.exit(0)
    else:
        print(f"\n❌ Configuration validation failed!")
        sys.exit(1)


if __name__ == "__main__":
    main()
