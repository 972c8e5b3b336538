"""Compile each C# test source into its own assembly."""

from pathlib import Path

from testbuild.console import fail, print_info, print_success
from testbuild.runner import run_command

REFERENCE_ASSEMBLIES = ["mscorlib.dll", "System.dll", "System.Core.dll"]


def find_sources(source_dir, only=None):
    """Find .cs files, optionally restricted to the given test names"""
    source_dir = Path(source_dir)
    if not source_dir.is_dir():
        fail(f"Source directory not found: {source_dir}")

    sources = sorted(source_dir.rglob("*.cs"))
    if not sources:
        fail(f"No C# sources found in {source_dir}")

    # Assemblies, stages and output folders are keyed by the file name
    seen = {}
    for source in sources:
        other = seen.setdefault(source.stem.lower(), source)
        if other != source:
            fail(f"Duplicate test name '{source.stem}': {other} and {source}",
                 hint="Rename one of them, test names must be unique")

    if only:
        by_name = {s.stem.lower(): s for s in sources}
        missing = [name for name in only if name.lower() not in by_name]
        if missing:
            fail(f"Test source not found: {', '.join(missing)}")
        sources = [s for s in sources if s.stem.lower() in {n.lower() for n in only}]

    return sources


def compile_arguments(csc, source, output, class_libraries, configuration="Release"):
    cmd = [
        str(csc),
        "-target:library",
        "-unsafe",
        "-nostdlib",
    ]

    # Build against the AOT profile, not the host framework
    for name in REFERENCE_ASSEMBLIES:
        reference = Path(class_libraries) / name
        if reference.is_file():
            cmd.append(f"-r:{reference}")

    if configuration == "Debug":
        cmd.append("-debug")
    else:
        cmd.append("-optimize+")

    cmd += [f"-out:{output}", str(source)]
    return cmd


def compile_source(csc, source, work_dir, class_libraries, configuration="Release",
                   verbose=False, dry_run=False):
    """Compile one source into <work>/assemblies/<name>/<name>.dll"""
    name = Path(source).stem
    assembly_dir = Path(work_dir) / "assemblies" / name
    assembly = assembly_dir / f"{name}.dll"

    if not dry_run:
        assembly_dir.mkdir(parents=True, exist_ok=True)
        if assembly.exists():
            assembly.unlink()

    print_info(f"Compiling {Path(source).name}...")
    cmd = compile_arguments(csc, source, assembly, class_libraries, configuration)
    run_command(cmd, verbose=verbose, dry_run=dry_run)

    if not dry_run and not assembly.is_file():
        fail(f"Compiler reported success but produced no assembly: {assembly}")

    print_success(f"Compiled {assembly}")
    return assembly


def compile_sources(csc, sources, work_dir, class_libraries, configuration="Release",
                    verbose=False, dry_run=False):
    assemblies = []
    for source in sources:
        assembly = compile_source(csc, source, work_dir, class_libraries, configuration,
                                  verbose=verbose, dry_run=dry_run)
        assemblies.append((Path(source).stem, assembly))
    return assemblies
