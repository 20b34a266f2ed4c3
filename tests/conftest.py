"""
Shared pytest fixtures for ledger parser tests.

Provides sample GL 505 report texts in the two observed row layouts.
"""

import pytest

from gl_ledger.categorize import reload_rules


# Narrative layout: date range + CATEGORY:LOCATION description.
# 11 rows across four sections, totalling 16,213.30.
NARRATIVE_LEDGER_TEXT = """GL 505 General Ledger
Production Location Costs Report

Acct: 6304 - LOCATION SECURITY
Account  LO  EPI  SET  Description                              Vendor                   Trans#    Amount
-------  --  ---  ---  -----------                              ------                   ------    ------
6304     QE  101  A01  01/15-01/16 SECURITY:LATCHFORD HOUSE     APEX SECURITY INC        123456  2,500.00
6304     QE  101  A02  01/17-01/18 SECURITY:DOWNTOWN LOFT       APEX SECURITY INC        123457  1,800.00
6304     QE  102  B01  01/20-01/21 SECURITY:BUCKLEY GYM         SECURE PARTNERS LLC      123458  3,200.00

Acct: 6305 - LOCATION POLICE
Account  LO  EPI  SET  Description                              Vendor                   Trans#    Amount
-------  --  ---  ---  -----------                              ------                   ------    ------
6305     QE  101  A01  01/15-01/16 POLICE:LATCHFORD HOUSE       LAPD OFF-DUTY            223456  1,200.00
6305     QE  102  B01  01/20-01/21 POLICE:BUCKLEY GYM           LAPD OFF-DUTY            223457  1,500.00

Acct: 6307 - LOCATION FIREMAN
Account  LO  EPI  SET  Description                              Vendor                   Trans#    Amount
-------  --  ---  ---  -----------                              ------                   ------    ------
6307     QE  101  A01  01/15-01/16 FIRE:LATCHFORD HOUSE         LAFD FIRE WATCH          323456    800.00
6307     QE  102  B01  01/20-01/21 FIRE:BUCKLEY GYM             LAFD FIRE WATCH          323457    950.00

Acct: 6342 - FEES & PERMITS
Account  LO  EPI  SET  Description                              Vendor                   Trans#    Amount
-------  --  ---  ---  -----------                              ------                   ------    ------
6342     QE  101  A01  01/15-01/16 PERMIT:LATCHFORD HOUSE       FILM LA                  423456    350.00
6342     QE  101  A01  01/15-01/16 TENTS:LATCHFORD HOUSE        PARTY RENTAL INC         423457  1,500.00
6342     QE  102  B01  01/20-01/21 PERMIT:BUCKLEY GYM           FILM LA                  423458    275.00
6342     QE  102  B01  01/20-01/21 GENERATOR:BUCKLEY GYM        POWER SOLUTIONS          423459  2,138.30
"""

# Payroll layout: "MM/DD/YY : NAME, I : PAYTYPE" plus dated memo rows.
# 22 rows, totalling 16,303.60.
PAYROLL_LEDGER_TEXT = """
The Shards - Season 1
Twentieth Century Fox Film Corp

General Ledger List By Account: Detail

Project: E62W    Episode: 101,102,103    Cost Period: 1 (05/07/25) To 17 (01/03/26)

Acct: 6305 - LOCATION POLICE
Account   LO  EPI  SET  WC    Description                                     Vendor Name           Trans#  Eff. Date      Amount
6305      01  101       QW    10/25/25 : ALBIN, W : REGULAR 1X                ENTERTAINMENT PARTNERS  1449  10/25/2025     619.20
6305      01  101       QW    10/25/25 : ALBIN, W : OVERTIME 1.5X             ENTERTAINMENT PARTNERS  1449  10/25/2025     348.30
6305      01  101       QW    10/25/25 : ALBIN, W : MEAL PENALTY NON UN       ENTERTAINMENT PARTNERS  1449  10/25/2025      77.40
6305      01  101       QW    10/25/25 : BOYD, R : REGULAR 1X                 ENTERTAINMENT PARTNERS  1449  10/25/2025     619.20
6305      01  101       QW    10/25/25 : BOYD, R : OVERTIME 1.5X              ENTERTAINMENT PARTNERS  1449  10/25/2025     464.40
6305      01  102       QW    10/28/25 : CHAPMAN, M : REGULAR 1X              ENTERTAINMENT PARTNERS  1450  10/28/2025   1,238.40
6305      01  102       QW    10/28/25 : CHAPMAN, M : OVERTIME 1.5X           ENTERTAINMENT PARTNERS  1450  10/28/2025     348.30
6305      01  103       QW    10/30/25 : DIAZ, E : REGULAR 1X                 ENTERTAINMENT PARTNERS  1451  10/30/2025   1,238.40
6305      01  103       QW    10/30/25 : DIAZ, E : MOTORCYCLE ALLOWANCE       ENTERTAINMENT PARTNERS  1451  10/30/2025     300.00

Acct: 6304 - LOCATION SECURITY
Account   LO  EPI  SET  WC    Description                                     Vendor Name           Trans#  Eff. Date      Amount
6304      01  101       QW    10/25/25 : JOHNSON, K : REGULAR 1X              SECURITY PARTNERS INC   2001  10/25/2025     450.00
6304      01  101       QW    10/25/25 : WILLIAMS, T : REGULAR 1X             SECURITY PARTNERS INC   2001  10/25/2025     450.00
6304      01  102       QW    10/28/25 : SMITH, J : REGULAR 1X                GUARD SERVICES LLC      2002  10/28/2025     525.00
6304      01  103       QW    10/30/25 : GARCIA, M : REGULAR 1X               ABC SECURITY INC        2003  10/30/2025     475.00

Acct: 6307 - LOCATION FIREMAN
Account   LO  EPI  SET  WC    Description                                     Vendor Name           Trans#  Eff. Date      Amount
6307      01  101       QW    10/25/25 : FIRE WATCH SERVICES                  LAFD FIRE WATCH         3001  10/25/2025     950.00
6307      01  102       QW    10/28/25 : FIRE WATCH SERVICES                  LAFD FIRE WATCH         3002  10/28/2025   1,200.00
6307      01  103       QW    10/30/25 : FIRE SAFETY STANDBY                  LAFD FIRE WATCH         3003  10/30/2025     875.00

Acct: 6342 - FEES & PERMITS
Account   LO  EPI  SET  WC    Description                                     Vendor Name           Trans#  Eff. Date      Amount
6342      01  101       QW    10/25/25 : FILMING PERMIT - DOWNTOWN            FILM LA                 4001  10/25/2025   1,250.00
6342      01  101       QW    10/25/25 : TENT RENTAL 20X30                    PARTY RENTALS INC       4002  10/25/2025     800.00
6342      01  102       QW    10/28/25 : FILMING PERMIT - BEACH               FILM LA                 4003  10/28/2025   2,100.00
6342      01  102       QW    10/28/25 : RESTROOM TRAILER RENTAL              PORTA SERVICES LLC      4004  10/28/2025     650.00
6342      01  103       QW    10/30/25 : FILMING PERMIT - WAREHOUSE           FILM LA                 4005  10/30/2025     900.00
6342      01  103       QW    10/30/25 : TABLES AND CHAIRS                    RENTAL CENTER INC       4006  10/30/2025     425.00

GL 505 - General Ledger List By Account
"""

SPEC_PAYROLL_LINE = (
    "6305 01 101 QW 10/25/25 : ALBIN, W : REGULAR 1X "
    "ENTERTAINMENT PARTNERS 1449 10/25/2025 619.20"
)


@pytest.fixture(autouse=True)
def default_rules(monkeypatch):
    """Run every test against the built-in rule tables."""
    monkeypatch.delenv("LEDGER_RULES_FILE", raising=False)
    reload_rules()
    yield
    reload_rules()


@pytest.fixture
def narrative_text():
    return NARRATIVE_LEDGER_TEXT


@pytest.fixture
def payroll_text():
    return PAYROLL_LEDGER_TEXT


@pytest.fixture
def payroll_line():
    return SPEC_PAYROLL_LINE
