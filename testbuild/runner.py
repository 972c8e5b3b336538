import subprocess

from testbuild.console import fail, print_error, print_info


def format_command(cmd):
    return ' '.join(str(c) for c in cmd)


def run_command(cmd, cwd=None, check=True, verbose=False, dry_run=False, env=None):
    """Run a command and wait for it.

    Output is captured unless ``verbose`` is set. With ``check`` a non-zero
    exit code ends the run after dumping whatever the tool printed.
    """
    cmd = [str(c) for c in cmd]
    print_info(f"Running: {format_command(cmd)}")

    if dry_run:
        return subprocess.CompletedProcess(cmd, 0, stdout="", stderr="")

    try:
        result = subprocess.run(cmd, cwd=cwd, env=env, capture_output=not verbose, text=True)
    except FileNotFoundError:
        fail(f"Executable not found: {cmd[0]}")
    except OSError as e:
        # Permission denied, or a Windows binary on another host
        fail(f"Cannot execute {cmd[0]}: {e}")

    if result.returncode != 0 and check:
        print_error(f"Command failed with exit code {result.returncode}")
        if result.stdout:
            print(result.stdout)
        if result.stderr:
            print(result.stderr)
        fail(f"{cmd[0]} did not complete, aborting build")

    return result
