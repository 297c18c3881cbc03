"""
MCP server entry point for brewbindr.

Run with: python -m mcp_brewbindr
"""

import logging
import sys

# stdout carries the MCP protocol; diagnostics go to stderr
logging.basicConfig(
    level=logging.INFO,
    format="[BREWBINDR] %(levelname)s %(name)s: %(message)s",
    stream=sys.stderr,
)

try:
    print("[BREWBINDR] Importing server module...", file=sys.stderr, flush=True)
    from mcp_brewbindr.config import get_config
    from mcp_brewbindr.server import mcp

    if __name__ == "__main__":
        config = get_config()
        print(f"[BREWBINDR] Workspace: {config.data_path}", file=sys.stderr, flush=True)
        print("[BREWBINDR] Starting MCP server...", file=sys.stderr, flush=True)
        # Let FastMCP auto-detect transport
        mcp.run(show_banner=False)
        print("[BREWBINDR] Server exited normally", file=sys.stderr, flush=True)
except Exception as e:
    print(f"Fatal error starting brewbindr MCP: {e}", file=sys.stderr)
    import traceback
    traceback.print_exc(file=sys.stderr)
    sys.exit(1)
