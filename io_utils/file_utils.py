# io_utils/file_utils.py
"""
File naming and parameter recording helpers.
"""

import os
import datetime
from typing import Dict


def make_result_filename(
    projname: str,
    input_path: str,
    frequency_count: int,
    channel: str,
    desc: str,
    ext: str = "png",
    outdir: str = ".",
) -> str:
    base = os.path.splitext(os.path.basename(input_path))[0]
    timestamp = datetime.datetime.now().strftime("%Y%m%dT%H%M%S")
    safe_desc = str(desc).replace(" ", "_")
    fname = f"{projname}_{base}_k-{int(frequency_count)}_{channel}_{safe_desc}_{timestamp}.{ext}"
    os.makedirs(outdir, exist_ok=True)
    return os.path.join(outdir, fname)


def save_parameters_txt(outdir: str, params: Dict, filename: str = "parameters.txt") -> str:
    """
    Record run settings as sorted `key: value` lines. Sequences such as a
    frequency schedule are written comma-separated without brackets.
    """
    os.makedirs(outdir, exist_ok=True)
    lines = []
    for key in sorted(params):
        value = params[key]
        if isinstance(value, (list, tuple)):
            value = ", ".join(str(v) for v in value)
        lines.append(f"{key}: {value}")
    path = os.path.join(outdir, filename)
    with open(path, "w", encoding="utf-8") as f:
        f.write("\n".join(lines) + "\n")
    return path
