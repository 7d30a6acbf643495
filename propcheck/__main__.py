#!/usr/bin/env python3
#===- propcheck/__main__.py - Module Entry Point -------------------------====#
# propcheck: Property-Based Testing Engine
# Copyright (C) 2025– propcheck Team
#
# Licensed under the GNU Affero General Public License v3.0 or later (AGPLv3+).
# Distributed without any warranty; see <http://www.gnu.org/licenses/>.
#===---------------------------------------------------------------------===#

from propcheck.cli import main

raise SystemExit(main())
