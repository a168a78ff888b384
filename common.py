#
# Copyright (c) 2024 LateGenXer
#
# SPDX-License-Identifier: AGPL-3.0-or-later
#


import pandas as pd
import streamlit as st

import environ

from data.taxyears import provider
from paye.calculator import PayeCalculator, PeriodBreakdown, TaxCalculation
from paye.bands import Allocation


# https://docs.streamlit.io/library/api-reference/utilities/st.set_page_config
def set_page_config(page_title, page_icon=":material/payments:", layout="centered", initial_sidebar_state="auto"):
    st.set_page_config(
        page_title=page_title,
        page_icon=page_icon,
        layout=layout,
        initial_sidebar_state=initial_sidebar_state,
        menu_items={
            "Get help": "https://github.com/LateGenXer/finance/discussions",
            "Report a Bug": "https://github.com/LateGenXer/finance/issues",
            "About": f"""UK PAYE tax calculator.

Version {environ.get_version()}.
""",
        }
    )


def page_end():
    # An invisible test marker, used when testing to ensure a page ran till the end
    st.html('<span id="test-marker" style="display:none"></span>')


# Shared across sessions; the calculator memoizes results itself
@st.cache_resource(show_spinner=False)
def get_calculator() -> PayeCalculator:
    return PayeCalculator(provider())


def tax_years() -> list[str]:
    return get_calculator().provider.tax_years()  # type: ignore[attr-defined]


def breakdown_dataframe(rows:list[PeriodBreakdown]|tuple[PeriodBreakdown, ...], label:str='Month') -> pd.DataFrame:
    df = pd.DataFrame.from_records(rows, columns=PeriodBreakdown._fields)
    df = df.rename(columns={
        'period': label,
        'gross': 'Gross',
        'tax_free': 'Tax free',
        'taxable': 'Taxable',
        'income_tax': 'Income tax',
        'national_insurance': 'NI',
        'net_pay': 'Net pay',
    })
    for column in df.columns[1:]:
        df[column] = df[column].astype(float)
    return df


def breakdown_chart(df:pd.DataFrame, label:str='Month'):
    import altair as alt

    source = df.melt(id_vars=[label], value_vars=['Income tax', 'NI', 'Net pay'], var_name='Component', value_name='Amount')

    chart = (
        alt.Chart(source)
        .mark_bar()
        .encode(
            alt.X(f"{label}:O", title=label),
            alt.Y("Amount:Q", stack=True, axis=alt.Axis(format=",.0f"), title="Amount (£)"),
            alt.Color("Component:N"),
        )
    )
    st.altair_chart(chart, use_container_width=True)


def bands_dataframe(allocation:Allocation) -> pd.DataFrame:
    return pd.DataFrame({
        'Band': [b.name for b in allocation.bands],
        'Rate': [float(b.rate) for b in allocation.bands],
        'Amount': [float(b.amount) for b in allocation.bands],
        'Tax': [float(b.tax) for b in allocation.bands],
    })


def summary_metrics(result:TaxCalculation):
    summary = result.annual_summary
    col1, col2, col3, col4 = st.columns(4)
    col1.metric('Gross pay', f'£{summary.gross:,.2f}')
    col2.metric('Income tax', f'£{summary.total_income_tax:,.2f}')
    col3.metric('National Insurance', f'£{summary.total_ni:,.2f}')
    col4.metric('Take home pay', f'£{summary.net_annual:,.2f}')


money_column = st.column_config.NumberColumn(format="£%.2f")
