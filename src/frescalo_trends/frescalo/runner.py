"""Invocation of the external Frescalo executable.

Frescalo is driven by a control file fed on stdin, one answer per line::

    <log file>
    <data file>
    <weights file>
    <benchmark exclusion file, or blank>
    <local frequency output file>
    <trend output file>
    <site statistics output file>
    <phi>
    <alpha>

It runs with its working directory set to the run's input directory; output
paths are absolute. Output is first written to ``<output>.partial`` and only
renamed to ``<output>`` after a clean exit with a trend file present, so a
failed run never leaves a directory that looks like a result. The phi/alpha
used are saved in the output as ``frescalo_params.json``.
"""

from __future__ import annotations

import json
import shutil
import subprocess
from dataclasses import asdict
from pathlib import Path

from frescalo_trends.errors import ExternalToolError
from frescalo_trends.frescalo.models import (
    CONTROL_FILE,
    FREQ_FILE,
    LOG_FILE,
    PARAMS_FILE,
    STATS_FILE,
    STDOUT_FILE,
    TREND_FILE,
    FrescaloInputs,
    FrescaloOutputs,
    FrescaloParams,
)


def build_control(inputs: FrescaloInputs, output_dir: Path, params: FrescaloParams) -> str:
    """Render the stdin control script for one invocation."""
    lines = [
        str(output_dir / LOG_FILE),
        inputs.data.name,
        inputs.weights.name,
        inputs.exclude.name if inputs.exclude is not None else "",
        str(output_dir / FREQ_FILE),
        str(output_dir / TREND_FILE),
        str(output_dir / STATS_FILE),
        f"{params.phi:.2f}",
        f"{params.alpha:.2f}",
    ]
    return "\n".join(lines) + "\n"


def resolve_executable(frescalo_path: Path | str) -> str:
    """Locate the Frescalo binary as an explicit path or on PATH.

    Raises:
        ExternalToolError: If it cannot be found.
    """
    candidate = Path(frescalo_path)
    if candidate.is_file():
        return str(candidate.resolve())
    found = shutil.which(str(frescalo_path))
    if found is None:
        msg = f"Frescalo executable not found: {frescalo_path}"
        raise ExternalToolError(msg, command=[str(frescalo_path)])
    return found


def run_frescalo(
    frescalo_path: Path | str,
    inputs: FrescaloInputs,
    output_dir: Path,
    params: FrescaloParams | None = None,
    timeout: float | None = None,
) -> FrescaloOutputs:
    """Run Frescalo once and return the finished output directory.

    Args:
        frescalo_path: Executable path or name on PATH.
        inputs: Files written by ``write_inputs``.
        output_dir: Final output directory; replaced if it already exists.
        params: phi/alpha (defaults if None).
        timeout: Seconds before the process is killed; None waits forever.

    Returns:
        FrescaloOutputs for ``output_dir``.

    Raises:
        ExternalToolError: Missing executable, launch failure, timeout,
            nonzero exit, or no trend file produced.
    """
    params = params or FrescaloParams()
    executable = resolve_executable(frescalo_path)
    command = [executable]

    output_dir = output_dir.resolve()
    staging = output_dir.with_name(output_dir.name + ".partial")

    control = build_control(inputs, staging, params)
    try:
        (inputs.directory / CONTROL_FILE).write_text(control)
    except OSError as exc:
        msg = f"Could not write Frescalo control file: {exc}"
        raise ExternalToolError(msg, command=command) from exc

    if staging.exists():
        shutil.rmtree(staging)
    staging.mkdir(parents=True)

    try:
        proc = subprocess.run(  # noqa: S603 (operator-supplied path)
            command,
            input=control,
            cwd=inputs.directory,
            capture_output=True,
            text=True,
            timeout=timeout,
            check=False,
        )
    except subprocess.TimeoutExpired as exc:
        shutil.rmtree(staging, ignore_errors=True)
        msg = f"Frescalo timed out after {timeout}s"
        raise ExternalToolError(
            msg, command=command, stdout=_text(exc.stdout), stderr=_text(exc.stderr)
        ) from exc
    except OSError as exc:
        shutil.rmtree(staging, ignore_errors=True)
        msg = f"Frescalo failed to launch: {exc}"
        raise ExternalToolError(msg, command=command) from exc

    if proc.returncode != 0:
        shutil.rmtree(staging, ignore_errors=True)
        raise ExternalToolError(
            "Frescalo exited with an error",
            command=command,
            returncode=proc.returncode,
            stdout=proc.stdout,
            stderr=proc.stderr,
        )

    if not (staging / TREND_FILE).exists():
        shutil.rmtree(staging, ignore_errors=True)
        raise ExternalToolError(
            f"Frescalo produced no {TREND_FILE}",
            command=command,
            returncode=proc.returncode,
            stdout=proc.stdout,
            stderr=proc.stderr,
        )

    (staging / STDOUT_FILE).write_text(proc.stdout)
    (staging / PARAMS_FILE).write_text(json.dumps(asdict(params), indent=2))
    if output_dir.exists():
        shutil.rmtree(output_dir)
    staging.rename(output_dir)
    return FrescaloOutputs(directory=output_dir)


def _text(value: str | bytes | None) -> str:
    if value is None:
        return ""
    if isinstance(value, bytes):
        return value.decode(errors="replace")
    return value
