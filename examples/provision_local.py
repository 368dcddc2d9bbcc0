#!/usr/bin/env python3
"""Full provisioning example: install Jenkins and configure it (run as root)."""

from jenkins_tools import config, provision


def main():
    """Run the full provisioning sequence and print a step summary."""
    cfg = config.get_config()

    print("🚀 Provisioning Jenkins...")
    report = provision.provision(cfg)

    print("\n📊 Summary:")
    for step in report.steps:
        print(f"   {'✎' if step.changed else '✓'} {step.name}")
    print(f"\n   {report.changed_count} of {len(report.steps)} steps changed something")


if __name__ == "__main__":
    main()
