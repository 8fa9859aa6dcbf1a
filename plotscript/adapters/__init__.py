from plotscript.adapters.normalize import coerce_1d, normalize_xy, series_xy, series_y

__all__ = ["coerce_1d", "normalize_xy", "series_xy", "series_y"]
