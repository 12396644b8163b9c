"""
Contract Deployment Wrapper
Runs scripts/deploy_contract.py
"""

import subprocess
import sys

if __name__ == "__main__":
    result = subprocess.run(
        [sys.executable, "scripts/deploy_contract.py"],
        cwd="."
    )

    sys.exit(result.returncode)
