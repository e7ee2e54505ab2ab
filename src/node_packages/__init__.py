"""
Node Packages Inventory

Inventories installed JavaScript/TypeScript packages by scanning the on-disk
caches of npm, pnpm, yarn, bun and deno.
"""

__version__ = "0.1.0"
__author__ = "Node Packages Inventory Team"
__description__ = "Concurrent inventory of Node.js package manager caches"
