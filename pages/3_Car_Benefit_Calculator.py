#
# Copyright (c) 2024 LateGenXer
#
# SPDX-License-Identifier: AGPL-3.0-or-later
#


import streamlit as st

import common
import environ

from paye.carbenefit import FuelType, car_benefit, max_capital_contribution
from paye.precision import format_currency


common.set_page_config(
    page_title="Car Benefit Calculator",
    layout="centered",
    initial_sidebar_state="expanded",
)


st.title('Company Car Benefit Calculator')


with st.sidebar:
    st.header("Car")

    st.number_input('List price (P11D value):', value=30000, min_value=0, step=500, key='list_price')
    st.selectbox('Fuel type:', [f.value for f in FuelType], key='fuel_type')
    fuel_type = FuelType(st.session_state.fuel_type)
    if fuel_type in (FuelType.PETROL, FuelType.DIESEL):
        st.number_input('CO₂ emissions (g/km):', value=120, min_value=0, step=1, key='co2')
    if fuel_type in (FuelType.HYBRID_ELECTRIC, FuelType.HYBRID_DIESEL):
        st.number_input('Electric range (miles):', value=0, min_value=0, step=1, key='electric_range')
    st.checkbox('Registered on or after 6 April 2020', value=True, key='registered_after_april_2020')
    if fuel_type is FuelType.DIESEL:
        st.checkbox('Meets RDE2 standard', value=st.session_state.registered_after_april_2020, key='rde2_compliant')
    st.number_input('Capital contribution:', value=0, min_value=0, max_value=max_capital_contribution, step=100, key='capital_contribution')
    st.checkbox('Employer provides fuel for private use', value=False, key='employer_provides_fuel')

    st.divider()

    tax_years = common.tax_years()
    index = tax_years.index(environ.tax_year) if environ.tax_year in tax_years else len(tax_years) - 1
    st.selectbox('Tax year:', tax_years, index=index, key='tax_year')
    st.select_slider('Marginal income tax rate:', value=20, options=(0, 19, 20, 21, 40, 42, 45, 47, 48), format_func='{}%'.format, key='tax_rate')


year_data = common.get_calculator().provider.get(st.session_state.tax_year)

benefit = car_benefit(
    st.session_state.list_price,
    year_data,
    fuel_type=fuel_type,
    co2=st.session_state.get('co2', 0),
    electric_range=st.session_state.get('electric_range', 0),
    registered_after_april_2020=st.session_state.registered_after_april_2020,
    rde2_compliant=st.session_state.get('rde2_compliant'),
    capital_contribution=st.session_state.capital_contribution,
    employer_provides_fuel=st.session_state.employer_provides_fuel,
    tax_rate=st.session_state.tax_rate,
)

col1, col2 = st.columns(2)
col1.metric('Benefit percentage', f'{benefit.percentage}%')
col2.metric('Taxable benefit', format_currency(benefit.total_benefit))

col1, col2 = st.columns(2)
col1.metric('Annual tax', format_currency(benefit.tax_payable))
col2.metric('Monthly tax', format_currency(benefit.monthly_tax_cost))

st.markdown(f'''
| | |
| :-- | --: |
| Car benefit | {format_currency(benefit.car_benefit)} |
| Fuel benefit | {format_currency(benefit.fuel_benefit)} |
| **Total** | **{format_currency(benefit.total_benefit)}** |
''')

common.page_end()
