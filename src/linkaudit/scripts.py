"""
Post-install script for setting up browser dependencies.

Downloads the browser binaries Playwright needs to render the pages under
audit. Run once after installing the package:

    linkaudit-postinstall            # chromium
    linkaudit-postinstall webkit     # any other engine
"""
import subprocess
import sys


def postinstall(argv=None):
    """
    Run playwright install for the requested browser engines.

    Args:
        argv: Engine names (default: sys.argv[1:], or chromium when empty)

    Returns:
        Process exit status
    """
    engines = list(argv if argv is not None else sys.argv[1:]) or ["chromium"]
    print(f"Running 'playwright install {' '.join(engines)}'...")
    try:
        result = subprocess.run(
            [sys.executable, "-m", "playwright", "install", *engines],
            check=True,
            capture_output=True,
            text=True
        )
        if result.stdout:
            print(result.stdout)
        print("Browser installed successfully.")
        return 0
    except subprocess.CalledProcessError as e:
        print(f"Error installing browsers for Playwright: {e}", file=sys.stderr)
        if e.stderr:
            print(e.stderr, file=sys.stderr)
        print(
            "Please run the following command manually:\n"
            f"  python -m playwright install {' '.join(engines)}",
            file=sys.stderr
        )
        return 1


if __name__ == "__main__":
    sys.exit(postinstall())
