"""Builders for wire-shaped test blocks."""

import json
import os

from notionhtml.models.blocks import Block

FIXTURES = os.path.join(os.path.dirname(__file__), "fixtures")


def rt(text, href=None, **annotations):
    """One-run rich-text array."""
    run = {"type": "text", "plain_text": text, "annotations": annotations}
    if href:
        run["href"] = href
    return [run]


def blk(block_id, block_type, payload=None, has_children=False):
    return Block.model_validate(
        {
            "object": "block",
            "id": block_id,
            "type": block_type,
            "has_children": has_children,
            block_type: payload or {},
        }
    )


def load_fixture(name):
    with open(os.path.join(FIXTURES, name), "r", encoding="utf-8") as f:
        return json.load(f)
