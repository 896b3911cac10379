# Copyright (c) 2026 TrailLensCo
# All rights reserved.
#
# This file is proprietary and confidential.
# Unauthorized copying, distribution, or use of this file,
# via any medium, is strictly prohibited without the express
# written permission of TrailLensCo.

"""
YAML exporter for word search puzzle sets.

Writes synthesized puzzles to a YAML intermediate file so a book can be
re-composed or re-rendered later without re-running synthesis.
"""

from datetime import datetime
from pathlib import Path
from typing import Any, Dict, List, Optional, Sequence

import yaml

from models import Puzzle

FORMAT_VERSION = 1


class PuzzleYAMLError(Exception):
    """Raised when a puzzle YAML document cannot be read."""
    pass


class YAMLExporter:
    """
    Exports puzzle sets to the YAML intermediate format.

    Usage:
        exporter = YAMLExporter()
        yaml_str = exporter.export(puzzles, {"title": "Animals"})
        exporter.save(puzzles, 'output/book.yaml')
        puzzles = exporter.load_puzzles('output/book.yaml')
    """

    def export(
        self,
        puzzles: Sequence[Puzzle],
        metadata: Optional[Dict[str, Any]] = None
    ) -> str:
        """
        Export puzzles to a YAML string.

        Args:
            puzzles: Synthesized puzzles in book order
            metadata: Extra book metadata (title, theme, seed, ...)

        Returns:
            YAML document with a header comment
        """
        meta = {
            'format_version': FORMAT_VERSION,
            'date': datetime.now().strftime("%Y-%m-%d"),
            'puzzle_count': len(puzzles),
        }
        if metadata:
            meta.update(metadata)

        data = {
            'metadata': meta,
            'puzzles': [puzzle.to_dict() for puzzle in puzzles],
        }

        header = "# Word Search Puzzle Set\n"
        header += "# Grids, word lists and answer paths for one book\n\n"

        yaml_content = yaml.dump(
            data,
            default_flow_style=False,
            allow_unicode=True,
            sort_keys=False,
            indent=2,
            width=80,
        )

        return header + yaml_content

    def save(
        self,
        puzzles: Sequence[Puzzle],
        path: str,
        metadata: Optional[Dict[str, Any]] = None
    ) -> str:
        """
        Save puzzles to a YAML file.

        Returns:
            Path to saved file
        """
        yaml_content = self.export(puzzles, metadata)

        path = Path(path)
        path.parent.mkdir(parents=True, exist_ok=True)

        with open(path, 'w', encoding='utf-8') as f:
            f.write(yaml_content)

        return str(path)

    def load_puzzles(self, path: str) -> List[Puzzle]:
        """
        Load puzzles from a YAML file written by save().

        Raises:
            PuzzleYAMLError: If the file is missing or malformed
        """
        path = Path(path)
        if not path.exists():
            raise PuzzleYAMLError(f"Puzzle file not found: {path}")

        with open(path, 'r', encoding='utf-8') as f:
            return self.parse(f.read())

    def parse(self, yaml_content: str) -> List[Puzzle]:
        """Parse a YAML string into puzzles."""
        try:
            data = yaml.safe_load(yaml_content)
        except yaml.YAMLError as e:
            raise PuzzleYAMLError(f"Invalid YAML content: {e}")

        if not isinstance(data, dict) or not isinstance(data.get('puzzles'), list):
            raise PuzzleYAMLError("Puzzle document must contain a 'puzzles' list")

        puzzles = []
        for i, entry in enumerate(data['puzzles']):
            if not isinstance(entry, dict):
                raise PuzzleYAMLError(
                    f"Malformed puzzle at index {i}: expected a mapping, "
                    f"got {type(entry).__name__}"
                )
            try:
                puzzles.append(Puzzle.from_dict(entry))
            except (AttributeError, KeyError, TypeError, ValueError) as e:
                raise PuzzleYAMLError(f"Malformed puzzle at index {i}: {e}")
        return puzzles


def export_puzzles_to_yaml(
    puzzles: Sequence[Puzzle],
    output_path: str,
    metadata: Optional[Dict[str, Any]] = None
) -> str:
    """Convenience function to export puzzles to a YAML file."""
    return YAMLExporter().save(puzzles, output_path, metadata)
