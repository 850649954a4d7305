"""caskctl - pre-emptive Homebrew cask remediation and selective upgrades."""

__version__ = "0.1.0"
