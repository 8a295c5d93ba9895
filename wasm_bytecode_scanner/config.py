"""
Configuration handling for the bytecode scanner tools.
"""

from dataclasses import dataclass, fields as dataclass_fields
from typing import Optional
import json
from pathlib import Path

from .formats.wasm_structures import NAME_SECTION, PRECOMPILED_MARKER


@dataclass
class Config:
    """Configuration options for the CLI and the inspection server."""

    # Scan options
    precompiled_marker: str = PRECOMPILED_MARKER
    name_section: str = NAME_SECTION

    # Report options
    show_abi_version: bool = True
    show_sections: bool = True
    show_function_names: bool = True

    # Server options
    max_module_size: int = 64 * 1024 * 1024

    @classmethod
    def load(cls, path: Optional[Path] = None) -> 'Config':
        """Load configuration from a JSON file."""
        if path is None:
            path = Path(__file__).parent / 'config.json'

        if not path.exists():
            return cls()

        with open(path, 'r') as f:
            data = json.load(f)

        # Convert camelCase to snake_case
        converted = {}
        for key, value in data.items():
            snake_key = ''.join(
                f'_{c.lower()}' if c.isupper() else c
                for c in key
            ).lstrip('_')
            converted[snake_key] = value

        # Filter to only include valid fields
        valid_fields = {f.name for f in dataclass_fields(cls)}
        filtered = {k: v for k, v in converted.items() if k in valid_fields}

        return cls(**filtered)

    def save(self, path: Path) -> None:
        """Save configuration to a JSON file."""
        # Convert snake_case to camelCase
        data = {}
        for key, value in self.__dict__.items():
            camel_key = ''.join(
                word.capitalize() if i > 0 else word
                for i, word in enumerate(key.split('_'))
            )
            data[camel_key] = value

        with open(path, 'w') as f:
            json.dump(data, f, indent=2)
