"""figfix -- rewrite pipeline for Figma MCP generated React/Tailwind markup."""

__version__ = "0.3.0"
