from dataclasses import dataclass, field
from pathlib import Path
from typing import Dict, List, Optional

DEFAULT_PARTIALS_ENABLED = True

@dataclass
class RenderConfig:
    # holds all configuration parameters for a single render.
    # relative paths are resolved against the current working directory at use.
    template_path: Optional[Path] = None
    context_paths: List[Path] = field(default_factory=list)
    output_file: Optional[Path] = None
    user_vars: Dict[str, str] = field(default_factory=dict)
    markdown_extensions: List[str] = field(default_factory=list)
    partials_enabled: bool = DEFAULT_PARTIALS_ENABLED
    save_profile_name: Optional[str] = None
