"""
sshd routing block domain module
"""
from .blocks import render_block, find_blocks, upsert_block, retract_block

__all__ = ["render_block", "find_blocks", "upsert_block", "retract_block"]
