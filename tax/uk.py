"""UK income tax and NI constants and functions."""


import datetime
import typing


# https://www.gov.uk/government/publications/rates-and-allowances-income-tax/income-tax-rates-and-allowances-current-and-past
personal_allowance      =  12570
basic_rate_limit        =  37700
pa_limit                = 100000
income_tax_threshold_45 = pa_limit + 2*personal_allowance
assert income_tax_threshold_45 == 125140


# https://www.gov.uk/marriage-allowance
marriage_allowance = 1260


weeks_per_year = 52
months_per_year = 12


# Band limits are relative to taxable income, i.e., after the personal allowance.
# https://www.gov.uk/scottish-income-tax
# https://www.gov.uk/welsh-income-tax
_ruk_bands = [
    ('Basic rate',       20,                       0, basic_rate_limit),
    ('Higher rate',      40,        basic_rate_limit, income_tax_threshold_45),
    ('Additional rate',  45, income_tax_threshold_45, None),
]

tax_years:dict[str, dict[str, typing.Any]] = {
    '2023-24': {
        'bands': {
            'UK': _ruk_bands,
            'Scotland': [
                ('Starter rate',       19,      0,   2162),
                ('Basic rate',         20,   2162,  13118),
                ('Intermediate rate',  21,  13118,  31092),
                ('Higher rate',        42,  31092, 125140),
                ('Top rate',           47, 125140,   None),
            ],
            'Wales': _ruk_bands,
        },
        'taper': {'threshold': pa_limit, 'rate': '0.5'},
        # https://www.gov.uk/guidance/rates-and-thresholds-for-employers-2023-to-2024
        # XXX: the main rate dropped to 10% from 6 January 2024; not modelled
        'ni': {
            'primary_threshold':    [242, 1048, 12570],
            'upper_earnings_limit': [967, 4189, 50270],
            'main_rate': '0.12',
            'higher_rate': '0.02',
        },
        'fuel_benefit_charge': 27800,
        'electric_car_percentage': 2,
    },
    '2024-25': {
        'bands': {
            'UK': _ruk_bands,
            'Scotland': [
                ('Starter rate',       19,      0,   2306),
                ('Basic rate',         20,   2306,  13991),
                ('Intermediate rate',  21,  13991,  31092),
                ('Higher rate',        42,  31092,  62430),
                ('Advanced rate',      45,  62430, 125140),
                ('Top rate',           48, 125140,   None),
            ],
            'Wales': _ruk_bands,
        },
        'taper': {'threshold': pa_limit, 'rate': '0.5'},
        # https://www.gov.uk/guidance/rates-and-thresholds-for-employers-2024-to-2025
        'ni': {
            'primary_threshold':    [242, 1048, 12570],
            'upper_earnings_limit': [967, 4189, 50270],
            'main_rate': '0.08',
            'higher_rate': '0.02',
        },
        'fuel_benefit_charge': 27800,
        'electric_car_percentage': 2,
    },
    '2025-26': {
        'bands': {
            'UK': _ruk_bands,
            'Scotland': [
                ('Starter rate',       19,      0,   2827),
                ('Basic rate',         20,   2827,  14921),
                ('Intermediate rate',  21,  14921,  31092),
                ('Higher rate',        42,  31092,  62430),
                ('Advanced rate',      45,  62430, 125140),
                ('Top rate',           48, 125140,   None),
            ],
            'Wales': _ruk_bands,
        },
        'taper': {'threshold': pa_limit, 'rate': '0.5'},
        # https://www.gov.uk/guidance/rates-and-thresholds-for-employers-2025-to-2026
        'ni': {
            'primary_threshold':    [242, 1048, 12570],
            'upper_earnings_limit': [967, 4189, 50270],
            'main_rate': '0.08',
            'higher_rate': '0.02',
        },
        'fuel_benefit_charge': 28200,
        'electric_car_percentage': 3,
    },
}


class TaxYear(typing.NamedTuple):

    year1: int
    year2: int

    def __str__(self) -> str:
        return f'{self.year1}-{self.year2 % 100:02d}'

    def start_date(self) -> datetime.date:
        return datetime.date(self.year1, 4, 6)

    def end_date(self) -> datetime.date:
        return datetime.date(self.year2, 4, 5)

    def tax_month(self, date:datetime.date) -> int:
        """Tax month (1-12) of a payment date; months run from the 6th."""
        assert self.start_date() <= date <= self.end_date()
        month = (date.year - self.year1) * 12 + date.month - 4
        if date.day < 6:
            month -= 1
        return month + 1

    def tax_week(self, date:datetime.date) -> int:
        """Tax week (1-52) of a payment date; the odd day(s) of week 53 fold into week 52."""
        assert self.start_date() <= date <= self.end_date()
        days = (date - self.start_date()).days
        return min(days // 7 + 1, weeks_per_year)

    @classmethod
    def from_date(cls, date:datetime.date) -> 'TaxYear':
        if date < date.replace(date.year, 4, 6):
            year1, year2 = date.year - 1, date.year
        else:
            year1, year2 = date.year, date.year + 1
        return cls(year1, year2)

    @staticmethod
    def _str_to_year(s:str) -> int:
        assert isinstance(s, str)
        if not s.isdigit():
            raise ValueError(s)
        y = int(s)
        if len(s) == 2 and s.isdigit():
            y += 2000
        if y < datetime.MINYEAR or y > datetime.MAXYEAR:
            raise ValueError(f'{s} out of range')
        return y

    @classmethod
    def from_string(cls, s:str) -> 'TaxYear':
        s = s.strip().replace('-', '/')
        try:
            s1, s2 = s.split('/', maxsplit=1)
        except ValueError:
            y2 = cls._str_to_year(s)
            y1 = y2 - 1
        else:
            y1 = cls._str_to_year(s1)
            if len(s2) == 2 and len(s1) == 4:
                # 2024/25
                y2 = cls._str_to_year(s2) - 2000 + (y1 // 100) * 100
                if y2 < y1:
                    y2 += 100
            else:
                y2 = cls._str_to_year(s2)
            if y1 + 1 != y2:
                raise ValueError(f'{s1} and {s2} are not consecutive years')
        return cls(y1, y2)


# https://www.gov.uk/repaying-your-student-loan/what-you-pay
# Annual repayment thresholds (2024/2025) and rates
student_loan_plans:dict[str, tuple[int, float]] = {
    'plan-1':   (24990, 0.09),
    'plan-2':   (27295, 0.09),
    'plan-4':   (31395, 0.09),
    'postgrad': (21000, 0.06),
}


# https://www.gov.uk/tax-on-your-private-pension/pension-tax-relief
# Relief at source contributions are paid net of basic rate relief
relief_at_source_rate = 0.20
