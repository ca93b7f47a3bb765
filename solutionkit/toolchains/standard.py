"""
Standard GCC/Clang toolchain.

Compiles project sources incrementally, in parallel, and links an executable
or archives a static library. Referenced static libraries are linked into
dependents automatically.

Output layout:
    <project>/build/<label>/obj/<item path>.o
    <project>/build/<label>/<name>          (executable)
    <project>/build/<label>/lib<name>.a     (static library)
    <project>/build/<label>/compile.stamp   (inputs of the last compile)
"""

import logging
import os
import platform
import threading
from concurrent.futures import ThreadPoolExecutor
from pathlib import Path
from typing import Any, Callable, Dict, List, Optional

from solutionkit.core.cancellation import CancellationToken
from solutionkit.core.console import Console
from solutionkit.core.filesystem import FilesystemError, atomic_write, safe_rmtree
from solutionkit.core.process import ProcessResult, run_process
from solutionkit.toolchains.base import Toolchain

logger = logging.getLogger(__name__)

IS_WINDOWS = platform.system() == "Windows"

FLAVOURS: Dict[str, Dict[str, str]] = {
    "gcc": {"cc": "gcc", "cxx": "g++", "ar": "ar"},
    "clang": {"cc": "clang", "cxx": "clang++", "ar": "ar"},
}


# Compiler, flags and defines of the last successful compile of a label.
STAMP_FILE = "compile.stamp"


def _mtime(path: Path) -> float:
    try:
        return path.stat().st_mtime
    except OSError:
        return 0.0


def _read_stamp(path: Path) -> Optional[str]:
    try:
        return path.read_text(encoding="utf-8")
    except OSError:
        return None


class StandardToolchain(Toolchain):
    """
    Toolchain driving a GCC-compatible compiler directly.

    Settings:
        cc: C compiler (default depends on flavour)
        cxx: C++ compiler
        ar: Archiver
        jobs: Default parallel compile jobs (default: CPU count)

    Example:
        >>> toolchain = StandardToolchain({"cxx": "g++-13"}, flavour="gcc")
        >>> toolchain.set_jobs(8)
        True
    """

    def __init__(self, settings: Optional[Dict[str, Any]] = None, flavour: str = "gcc"):
        super().__init__(settings)
        if flavour not in FLAVOURS:
            raise ValueError(f"Unknown compiler flavour: {flavour}")

        defaults = FLAVOURS[flavour]
        self.name = flavour
        self.flavour = flavour
        self.cc = str(self.settings.get("cc") or defaults["cc"])
        self.cxx = str(self.settings.get("cxx") or defaults["cxx"])
        self.ar = str(self.settings.get("ar") or defaults["ar"])
        self.jobs = int(self.settings.get("jobs") or os.cpu_count() or 1)
        self._console_lock = threading.Lock()

    @classmethod
    def factory(cls, flavour: str) -> Callable[..., "StandardToolchain"]:
        """Registry factory producing toolchains of the given flavour."""

        def create(settings: Optional[Dict[str, Any]] = None) -> "StandardToolchain":
            return cls(settings, flavour=flavour)

        return create

    def set_jobs(self, jobs: int) -> bool:
        if jobs < 1:
            raise ValueError(f"Job count must be at least 1, got {jobs}")
        self.jobs = jobs
        return True

    def output_path(self, project, label: str = "") -> Path:
        build_dir = self.build_directory(project, label)
        if project.kind == "static-library":
            return build_dir / f"lib{project.name}.a"
        return build_dir / (f"{project.name}.exe" if IS_WINDOWS else project.name)

    # ========================================================================
    # Build
    # ========================================================================

    def build_project(
        self,
        console: Console,
        project,
        label: str,
        defines: List[str],
        token: CancellationToken,
    ) -> bool:
        console.write_line(f"Building: {project.name}")

        sources = project.source_files
        if not sources:
            console.error(f"Project {project.name} has no source files.")
            return False

        build_dir = self.build_directory(project, label)
        object_dir = build_dir / "obj"
        stamp_path = build_dir / STAMP_FILE
        headers_mtime = max(
            (_mtime(project.directory / header.path) for header in project.headers),
            default=0.0,
        )

        include_args = self._include_args(project)
        define_args = [f"-D{define}" for define in defines]
        stamp = self._stamp(project, include_args + define_args)
        inputs_changed = _read_stamp(stamp_path) != stamp
        if inputs_changed:
            logger.debug(f"Compile inputs changed for {project.name}, rebuilding all sources")
            stamp_path.unlink(missing_ok=True)

        pending = []
        objects = []
        for source in sources:
            source_path = project.directory / source.path
            object_path = object_dir / f"{source.path}.o"
            objects.append(object_path)
            if not source_path.exists():
                console.error(f"Source file not found: {source_path}")
                return False
            source_input = max(_mtime(source_path), headers_mtime)
            if not inputs_changed and _mtime(object_path) >= source_input > 0:
                logger.debug(f"Up to date: {source.path}")
                continue
            pending.append((source, source_path, object_path))

        if pending:
            logger.debug(f"Compiling {len(pending)} files with {self.jobs} jobs")
            with ThreadPoolExecutor(max_workers=self.jobs) as executor:
                futures = [
                    executor.submit(
                        self._compile,
                        console,
                        project,
                        source,
                        source_path,
                        object_path,
                        include_args + define_args,
                        token,
                    )
                    for source, source_path, object_path in pending
                ]
                results = [future.result() for future in futures]
            if not all(results):
                console.error(f"Build failed: {project.name}")
                return False

        if inputs_changed:
            atomic_write(stamp_path, stamp)

        output = self.output_path(project, label)
        libraries = self._reference_libraries(project, label)
        newest_input = max([_mtime(p) for p in objects + libraries], default=0.0)
        if pending or _mtime(output) < newest_input:
            if not self._link(console, project, output, objects, libraries, token):
                console.error(f"Build failed: {project.name}")
                return False

        console.success(f"Build succeeded: {project.name} -> {output}")
        return True

    def _stamp(self, project, extra_args: List[str]) -> str:
        """Everything besides file contents that decides what an object holds."""
        lines = [self.cc, self.cxx, *extra_args, *project.compiler_flags]
        return "\n".join(lines) + "\n"

    def _compile(
        self,
        console: Console,
        project,
        source,
        source_path: Path,
        object_path: Path,
        extra_args: List[str],
        token: CancellationToken,
    ) -> bool:
        compiler = self.cc if source.language in ("c", "asm") else self.cxx
        object_path.parent.mkdir(parents=True, exist_ok=True)
        command = [
            compiler,
            "-c",
            str(source_path),
            "-o",
            str(object_path),
            *extra_args,
            *project.compiler_flags,
        ]
        result = self._run(console, command, project.directory, token)
        with self._console_lock:
            console.write_line(f"[{'OK' if result.ok else 'FAIL'}] {source.path}")
        return result.ok

    def _link(
        self,
        console: Console,
        project,
        output: Path,
        objects: List[Path],
        libraries: List[Path],
        token: CancellationToken,
    ) -> bool:
        output.parent.mkdir(parents=True, exist_ok=True)
        if project.kind == "static-library":
            if output.exists():
                output.unlink()
            command = [self.ar, "rcs", str(output), *[str(o) for o in objects]]
        else:
            command = [
                self.cxx,
                *[str(o) for o in objects],
                "-o",
                str(output),
                *[str(lib) for lib in libraries],
                *project.linker_flags,
                *[f"-l{name}" for name in self._system_libraries(project)],
            ]
        return self._run(console, command, project.directory, token).ok

    def _run(
        self, console: Console, command: List[str], cwd: Path, token: CancellationToken
    ) -> ProcessResult:
        try:
            result = run_process(command, cwd=cwd, cancel_token=token)
        except FileNotFoundError:
            with self._console_lock:
                console.error(f"Tool not found: {command[0]}")
            return ProcessResult(returncode=127, output="")

        if result.output:
            with self._console_lock:
                console.write(result.output)
        return result

    # ========================================================================
    # Reference helpers
    # ========================================================================

    def _include_args(self, project) -> List[str]:
        directories = [project.directory / d for d in project.include_dirs]
        for reference in self._walk_references(project):
            directories.extend(reference.directory / d for d in reference.public_include_dirs)

        args = []
        seen = set()
        for directory in directories:
            if directory not in seen:
                seen.add(directory)
                args.append(f"-I{directory}")
        return args

    def _reference_libraries(self, project, label: str) -> List[Path]:
        """Static libraries of all references, dependents before dependencies."""
        libraries = []
        for reference in self._walk_references(project):
            if reference.kind != "static-library" or reference.toolchain is None:
                continue
            libraries.append(reference.toolchain.output_path(reference, label))
        return libraries

    def _system_libraries(self, project) -> List[str]:
        names = list(project.libraries)
        for reference in self._walk_references(project):
            names.extend(lib for lib in reference.libraries if lib not in names)
        return names

    @staticmethod
    def _walk_references(project) -> List[Any]:
        """Transitive references, each once, dependents before their dependencies."""
        ordered = []
        visited = {project.name}

        def visit(current) -> None:
            for reference in current.references:
                if reference.name not in visited:
                    visited.add(reference.name)
                    visit(reference)
                    ordered.append(reference)

        visit(project)
        return list(reversed(ordered))

    # ========================================================================
    # Clean
    # ========================================================================

    def clean(
        self,
        console: Console,
        project,
        cancel_token: Optional[CancellationToken] = None,
    ) -> None:
        build_root = project.directory / "build"
        console.write_line(f"Cleaning: {project.name}")
        try:
            safe_rmtree(build_root, require_prefix=project.directory)
        except (FilesystemError, ValueError) as e:
            console.error(f"Clean failed: {e}")
            return
        console.success(f"Cleaned: {project.name}")


__all__ = ["FLAVOURS", "StandardToolchain"]
