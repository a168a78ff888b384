#
# SPDX-License-Identifier: AGPL-3.0-or-later
#


import os.path
import subprocess


ci: bool = os.environ.get('CI', 'false').lower() == 'true'


# Default tax year, in YYYY-YY format
tax_year: str = os.environ.get('PAYE_TAX_YEAR', '2024-25')


# When set, tax year data is fetched from this URL instead of the bundled tables
data_url: str|None = os.environ.get('PAYE_DATA_URL') or None


memo_size: int = int(os.environ.get('PAYE_MEMO_SIZE', '128'))


def get_version() -> str:
    try:
        version = subprocess.check_output([
            'git',
                '-C', os.path.dirname(__file__),
            'show',
                '-s',
                '--date=format:%Y-%m-%d',
                '--format=%h (%cd)',
                'HEAD',
        ], text=True, stderr=subprocess.DEVNULL)
    except (FileNotFoundError, subprocess.CalledProcessError):
        if ci:
            raise
        else:
            version = 'unknown'
    else:
        version = version.rstrip()
    return version
