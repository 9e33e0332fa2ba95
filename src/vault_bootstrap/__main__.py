# SPDX-License-Identifier: MIT
# Copyright (c) 2025 OmniNode Team
"""Allow ``python -m vault_bootstrap``."""

from vault_bootstrap.cli.commands import main

if __name__ == "__main__":
    main()
