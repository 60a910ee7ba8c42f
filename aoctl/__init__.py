"""aoctl - deploy and redeploy AuroraConfig applications across clusters."""

__version__ = "0.1.0"
