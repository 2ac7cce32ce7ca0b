"""Evaluate a file of expressions, one per line, into a results file."""
from pathlib import Path
import tarfile
import tempfile
from typing import Callable, Dict, Iterable, List
import zipfile

import py7zr
from pydantic import BaseModel, ConfigDict, Field, FilePath

from mathproof.common.errors import MathProofError
from mathproof.common.expression import parse_expression
from mathproof.common.logger import logger
from mathproof.common.models import EvaluationRequest, EvaluationResult


def _archive_format(path: Path) -> str:
    """Archive suffix of a path, ``.tar.xz`` counting as one suffix."""
    if path.suffixes[-2:] == [".tar", ".xz"]:
        return ".tar.xz"
    return path.suffix


def _first_txt_member(names: Iterable[str], archive_format: str) -> str:
    """
    Pick the member holding the expressions: the first one named ``*.txt``.

    :param Iterable[str] names: Member names in archive order
    :param str archive_format: Archive suffix, for the error message

    :return: Member name
    :rtype: str
    :raises ValueError: If no member is a .txt file
    """
    for name in names:
        if name.endswith(".txt"):
            return name
    raise ValueError(f"📄❌ No .txt file found in {archive_format} archive")


def _read_zip(path: Path) -> bytes:
    with zipfile.ZipFile(path) as zf:
        return zf.read(_first_txt_member(zf.namelist(), ".zip"))


def _read_tar_xz(path: Path) -> bytes:
    with tarfile.open(path, "r:xz") as tf:
        members: Dict[str, tarfile.TarInfo] = {m.name: m for m in tf.getmembers() if m.isfile()}
        member = members[_first_txt_member(members, ".tar.xz")]
        return tf.extractfile(member).read()


def _read_7z(path: Path) -> bytes:
    with py7zr.SevenZipFile(path, mode="r") as archive:
        entries = {entry.filename: entry for entry in archive.list() if not entry.is_directory}
        name = _first_txt_member(entries, ".7z")
        # py7zr decompresses to a directory, the member is read back from it
        with tempfile.TemporaryDirectory() as tmpdir:
            archive.extract(path=tmpdir, targets=[name])
            return (Path(tmpdir) / name).read_bytes()


# Archive suffix to the function returning the raw bytes of its .txt member
ARCHIVE_READERS: Dict[str, Callable[[Path], bytes]] = {
    ".zip": _read_zip,
    ".tar.xz": _read_tar_xz,
    ".7z": _read_7z,
}


class BatchEvaluator(BaseModel):
    """
    Batch evaluator for files of expressions.

    The batch evaluator:
    - reads expressions from a plain text file or an archive
    - evaluates each non-empty line independently
    - writes one result line per expression to the output file as soon as it is computed
    """

    # Make the Pydantic instance immutable (read-only), paths must not change during a run
    model_config = ConfigDict(frozen=True)

    input_file: FilePath = Field(..., description="Text file or archive holding one expression per line")
    output_file: Path = Field(..., description="Path to write evaluation results")

    @staticmethod
    def evaluate_line(expression: str) -> EvaluationResult:
        """
        Parse and evaluate a single expression, capturing any failure.

        :param str expression: Expression text

        :return: Result holding either the number or the error message
        :rtype: EvaluationResult
        """
        request = EvaluationRequest(expression=expression)
        try:
            value: float = parse_expression(request.expression).evaluate().value
        except MathProofError as exc:
            return EvaluationResult(expression=request.expression, error=str(exc))
        return EvaluationResult(expression=request.expression, result=value)

    def run(self) -> List[EvaluationResult]:
        """
        Evaluate every non-empty line of the input file and write the results.

        :return: Results in input order
        :rtype: List[EvaluationResult]
        :raises ValueError: If the archive format is unsupported or contains no .txt file
        """
        logger.info(f"📄 Evaluating expressions from {self.input_file}")

        lines: List[str] = [line.strip() for line in self._read_input().splitlines() if line.strip()]
        results: List[EvaluationResult] = []

        with self.output_file.open("w", encoding="utf-8") as f_out:
            for line_number, expression in enumerate(lines, start=1):
                result = self.evaluate_line(expression)
                if not result.ok:
                    logger.error(f"❌ Line {line_number}: {result.error}: {expression!r}")
                results.append(result)

                # Write output immediately
                f_out.write(f"{result.render()}\n")
                f_out.flush()

        logger.info(f"✅ {len(results)} expressions evaluated, results written to {self.output_file}")
        return results

    def _read_input(self) -> str:
        """
        Return the expression text of the input file.

        Plain ``.txt`` files are read as is. For archives the first ``.txt``
        member is read, see ARCHIVE_READERS.

        :return: Expression text
        :rtype: str
        :raises ValueError: If the archive format is unsupported or contains no .txt file
        """
        if self.input_file.suffix == ".txt":
            return self.input_file.read_text(encoding="utf-8")

        archive_format: str = _archive_format(self.input_file)
        reader = ARCHIVE_READERS.get(archive_format)
        if reader is None:
            raise ValueError(f"📄❌ Unsupported input format: {archive_format or self.input_file.name}")
        logger.info(f"📦 Reading expressions from {archive_format} archive {self.input_file.name}")
        return reader(self.input_file).decode("utf-8")
