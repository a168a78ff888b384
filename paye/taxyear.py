#
# Copyright (c) 2024 LateGenXer
#
# SPDX-License-Identifier: AGPL-3.0-or-later
#

"""Tax year configuration: band tables, taper and NI thresholds."""


import logging
import typing

from decimal import Decimal

import tax.uk

from paye.allowance import TaperConfig
from paye.bands import TaxBand, band, check_bands
from paye.ni import NIRates, NIThresholds, check_thresholds, thresholds
from paye.precision import to_decimal
from paye.taxcode import Region
from tax.uk import TaxYear


logger = logging.getLogger('taxyear')


class UnknownTaxYear(LookupError):

    def __init__(self, tax_year:str):
        super().__init__(f'no tax data for tax year {tax_year}')
        self.tax_year = tax_year


class RegionBands(typing.NamedTuple):
    name: str
    bands: tuple[TaxBand, ...]


class TaxYearData(typing.NamedTuple):
    tax_year: str
    regions: dict[Region, RegionBands]
    taper: TaperConfig
    ni_thresholds: NIThresholds
    ni_rates: NIRates
    fuel_benefit_charge: Decimal = Decimal(0)
    electric_car_percentage: Decimal = Decimal(2)

    def region_bands(self, region:Region) -> RegionBands:
        try:
            return self.regions[region]
        except KeyError:
            return self.regions[Region.UK]


def normalize_tax_year(tax_year:str|TaxYear) -> str:
    """Canonical YYYY-YY form, e.g. '2024/2025' -> '2024-25'."""

    if isinstance(tax_year, TaxYear):
        return str(tax_year)
    return str(TaxYear.from_string(tax_year))


def from_dict(tax_year:str, d:dict[str, typing.Any]) -> TaxYearData:
    """Build tax year data from its plain (JSON-compatible) representation.

    Raises ValueError for malformed tables.
    """

    try:
        regions = {}
        for region in Region:
            rows = d['bands'].get(region.value)
            if rows is None:
                continue
            bands = tuple(band(name, rate, start, end) for name, rate, start, end in rows)
            check_bands(bands)
            regions[region] = RegionBands(region.value, bands)
        if Region.UK not in regions:
            raise ValueError('missing UK bands')

        taper = d.get('taper', {})
        taper_config = TaperConfig(
            threshold=to_decimal(taper.get('threshold', tax.uk.pa_limit)),
            rate=to_decimal(taper.get('rate', '0.5')),
        )

        ni = d['ni']
        ni_thresholds = NIThresholds(
            primary_threshold=thresholds(*ni['primary_threshold']),
            upper_earnings_limit=thresholds(*ni['upper_earnings_limit']),
        )
        ni_rates = NIRates(
            main_rate=to_decimal(ni.get('main_rate', NIRates._field_defaults['main_rate'])),
            higher_rate=to_decimal(ni.get('higher_rate', NIRates._field_defaults['higher_rate'])),
        )
    except (KeyError, TypeError) as e:
        raise ValueError(f'malformed tax data for {tax_year}: {e!r}') from e

    check_thresholds(ni_thresholds)

    return TaxYearData(
        tax_year=tax_year,
        regions=regions,
        taper=taper_config,
        ni_thresholds=ni_thresholds,
        ni_rates=ni_rates,
        fuel_benefit_charge=to_decimal(d.get('fuel_benefit_charge', 0)),
        electric_car_percentage=to_decimal(d.get('electric_car_percentage', 2)),
    )


class Provider(typing.Protocol):

    def get(self, tax_year:str) -> TaxYearData:  # pragma: no cover
        ...


class BuiltinTaxYears:
    """Tax years bundled with the package."""

    def __init__(self, tables:dict[str, dict[str, typing.Any]]|None=None):
        self.tables = tax.uk.tax_years if tables is None else tables
        self._cache:dict[str, TaxYearData] = {}

    def tax_years(self) -> list[str]:
        return sorted(self.tables)

    def get(self, tax_year:str) -> TaxYearData:
        key = normalize_tax_year(tax_year)
        try:
            return self._cache[key]
        except KeyError:
            pass
        try:
            table = self.tables[key]
        except KeyError:
            raise UnknownTaxYear(key) from None
        data = from_dict(key, table)
        self._cache[key] = data
        logger.debug('loaded tax year %s', key)
        return data
