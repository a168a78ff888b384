#
# Copyright (c) 2024 LateGenXer
#
# SPDX-License-Identifier: AGPL-3.0-or-later
#

"""Tax year data published as a JSON document.

The document maps YYYY-YY tax years to the same structure as the bundled
tables in tax.uk, e.g.:

    {
      "2024-25": {
        "bands": {"UK": [["Basic rate", 20, 0, 37700], ...], ...},
        "taper": {"threshold": 100000, "rate": "0.5"},
        "ni": {"primary_threshold": [242, 1048, 12570], ...},
        ...
      }
    }
"""


import functools
import logging
import typing

import requests

from paye.taxyear import TaxYearData, UnknownTaxYear, from_dict, normalize_tax_year


logger = logging.getLogger('taxyears')


# https://requests.readthedocs.io/en/latest/user/advanced/#keep-alive
_session = requests.Session()


class RemoteTaxYears:

    def __init__(self, url:str, session:requests.Session|None=None, timeout:float=10):
        self.url = url
        self.session = _session if session is None else session
        self.timeout = timeout
        self._get = functools.lru_cache(maxsize=None)(self._fetch)

    def document(self) -> dict[str, typing.Any]:
        headers = {'user-agent': 'Mozilla/5.0', 'accept': 'application/json'}
        r = self.session.get(self.url, headers=headers, timeout=self.timeout)
        r.raise_for_status()
        content_type = r.headers.get('content-type', '')
        if 'json' not in content_type:
            logger.warning('unexpected content type %r from %s', content_type, self.url)
        doc = r.json()
        if not isinstance(doc, dict):
            raise ValueError(f'unexpected tax data document from {self.url}')
        return doc

    def _fetch(self, tax_year:str) -> TaxYearData:
        try:
            doc = self.document()
        except requests.HTTPError as e:
            if e.response is not None and e.response.status_code == 404:
                raise UnknownTaxYear(tax_year) from e
            raise
        try:
            table = doc[tax_year]
        except KeyError:
            raise UnknownTaxYear(tax_year) from None
        logger.info('fetched tax year %s from %s', tax_year, self.url)
        return from_dict(tax_year, table)

    def tax_years(self) -> list[str]:
        return sorted(self.document())

    def get(self, tax_year:str) -> TaxYearData:
        return self._get(normalize_tax_year(tax_year))

    def clear(self) -> None:
        self._get.cache_clear()


def provider():
    """Tax year provider selected by the environment."""

    import environ
    from paye.taxyear import BuiltinTaxYears

    if environ.data_url:
        return RemoteTaxYears(environ.data_url)
    return BuiltinTaxYears()
