from plotscript.engine.base import Engine
from plotscript.engine.config import EngineConfig, load_engine_config
from plotscript.engine.runner import GnuplotRunner, save_script
from plotscript.engine.version import EngineVersion, engine_version, parse_version

__all__ = [
    "Engine",
    "EngineConfig",
    "EngineVersion",
    "GnuplotRunner",
    "engine_version",
    "load_engine_config",
    "parse_version",
    "save_script",
]
