from __future__ import annotations

from collections.abc import Iterable, Mapping, Sequence
from decimal import Decimal
from typing import Any

import numpy as np

from plotscript.errors import InvalidData
from plotscript.series import SeriesData


try:
    import pandas as pd
except Exception:  # pragma: no cover - optional dependency
    pd = None  # type: ignore[assignment]

try:
    import torch
except Exception:  # pragma: no cover - optional dependency
    torch = None  # type: ignore[assignment]


def normalize_xy(
    y: Any = None,
    *,
    x: Any = None,
    data: Any = None,
    source_name: str | None = None,
) -> SeriesData:
    y_values = _resolve_input(y=y, key="y", data=data)
    if y_values is None:
        raise InvalidData("y input is required")

    y_arr = coerce_1d(y_values, label="y")
    if y_arr.size == 0:
        raise InvalidData("empty series")

    if x is None:
        x_arr = np.arange(y_arr.size, dtype=np.float64)
    else:
        x_values = _resolve_input(y=x, key="x", data=data)
        x_arr = coerce_1d(x_values, label="x")

    if x_arr.shape != y_arr.shape:
        raise InvalidData(f"x and y length mismatch: {x_arr.size} != {y_arr.size}")

    if source_name is None and isinstance(y, str):
        source_name = y
    return SeriesData(x=x_arr, y=y_arr, source_name=source_name)


def series_xy(x: Any, y: Any, *, source_name: str | None = None) -> SeriesData:
    return normalize_xy(y, x=x, source_name=source_name)


def series_y(y: Any, *, source_name: str | None = None) -> SeriesData:
    return normalize_xy(y, source_name=source_name)


def coerce_1d(value: Any, *, label: str) -> np.ndarray:
    if torch is not None and isinstance(value, torch.Tensor):
        tensor = value.detach()
        if tensor.ndim != 1:
            raise InvalidData(f"{label} must be 1-D")
        if tensor.is_cuda:
            tensor = tensor.cpu()
        return _require_finite(tensor.to(torch.float64).numpy(), label=label)

    if pd is not None and isinstance(value, pd.Series):
        return _require_finite(_coerce_ndarray(value.to_numpy(), label=label), label=label)

    if isinstance(value, np.ndarray):
        if value.ndim != 1:
            raise InvalidData(f"{label} must be 1-D")
        return _require_finite(_coerce_ndarray(value, label=label), label=label)

    if isinstance(value, (str, bytes, bytearray, Mapping)):
        raise InvalidData(f"unsupported {label} input type: {type(value)!r}")

    if isinstance(value, Iterable):
        items = value if isinstance(value, Sequence) else list(value)
        return _require_finite(_coerce_ndarray(np.asarray(items, dtype=object), label=label), label=label)

    raise InvalidData(f"unsupported {label} input type: {type(value)!r}")


def _resolve_input(y: Any, key: str, data: Any) -> Any:
    if data is not None:
        if pd is None:
            raise InvalidData("pandas is required when using `data=`")
        if not isinstance(data, pd.DataFrame):
            raise InvalidData("`data` must be a pandas DataFrame")
        if isinstance(y, str):
            if y not in data.columns:
                raise InvalidData(f"column not found: {y}")
            return data[y]
        if y is None:
            if key == "y":
                numeric_cols = [c for c in data.columns if _is_numeric_dtype(data[c])]
                if len(numeric_cols) != 1:
                    raise InvalidData("when y is omitted, data must have exactly one numeric column")
                return data[numeric_cols[0]]
            return None
        return y

    if pd is not None and isinstance(y, pd.DataFrame):
        numeric_cols = [c for c in y.columns if _is_numeric_dtype(y[c])]
        if len(numeric_cols) != 1:
            raise InvalidData("1-D DataFrame input must contain exactly one numeric column")
        return y[numeric_cols[0]]

    return y


def _is_numeric_dtype(series: Any) -> bool:
    if pd is None:
        return False
    return bool(pd.api.types.is_numeric_dtype(series))


def _coerce_ndarray(arr: np.ndarray, *, label: str) -> np.ndarray:
    if arr.ndim != 1:
        raise InvalidData(f"{label} must be 1-D")
    if arr.dtype.kind in {"i", "u", "f", "b"}:
        return arr.astype(np.float64, copy=False)

    out = np.empty(arr.shape[0], dtype=np.float64)
    for i, raw in enumerate(arr.tolist()):
        if raw is None:
            raise InvalidData(f"{label} contains a missing value at index {i}")
        if isinstance(raw, Decimal):
            out[i] = float(raw)
            continue
        if isinstance(raw, (str, bytes)):
            raise InvalidData(f"{label} contains non-numeric value at index {i}: {raw!r}")
        try:
            out[i] = float(raw)
        except (TypeError, ValueError) as exc:
            raise InvalidData(f"{label} contains non-numeric value at index {i}: {raw!r}") from exc
    return out


def _require_finite(arr: np.ndarray, *, label: str) -> np.ndarray:
    bad = np.flatnonzero(~np.isfinite(arr))
    if bad.size:
        raise InvalidData(f"{label} contains a non-finite value at index {int(bad[0])}")
    return arr
