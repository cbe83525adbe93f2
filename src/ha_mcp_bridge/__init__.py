"""
Home Assistant MCP Bridge
Exposes Home Assistant light and switch control over line-delimited JSON-RPC
"""

__version__ = "1.0.0"
SERVER_NAME = "ha-mcp-bridge"

__all__ = ['__version__', 'SERVER_NAME']
