#
# Copyright (c) 2024 LateGenXer
#
# SPDX-License-Identifier: AGPL-3.0-or-later
#


import logging

import streamlit as st

import common


logging.basicConfig(
    level=logging.INFO,
    format='%(asctime)s %(name)s %(levelname)s %(message)s',
    datefmt='%Y-%m-%d %H:%M:%S',
    force=True,
)


common.set_page_config(
    page_title="UK PAYE tax calculator",
    layout="centered",
    initial_sidebar_state="expanded"
)

st.title("UK PAYE tax calculator")

st.markdown('''Welcome!

These tools work out the income tax and National Insurance deducted from UK employment income under PAYE (Pay As You Earn):

- **PAYE Calculator**: monthly breakdown of tax, NI and take home pay for a salary and tax code, on a cumulative or Week1/Month1 basis.
- **Period Tax Calculator**: check the tax on a single payslip, including pension and student loan deductions.
- **Car Benefit Calculator**: taxable benefit of a company car and fuel.
- **Previous Employment**: reconcile pay and tax from earlier jobs in the tax year, and choose between a cumulative or Week1/Month1 code.
- **Secondary Employment**: compare the tax on two jobs with the tax on the same income from a single employment.

Personal data entered into the website will not persist across page reloads.

Please read the [disclaimer](/Disclaimer) and choose a tool on the left sidebar.
''')

common.page_end()
