import unittest
from decimal import Decimal
import datetime as dt

from pylending import (
    InvalidInputError,
    calculate_end_date,
    calculate_final_installment,
    calculate_loan_summary,
    calculate_monthly_due,
    calculate_total_amount_payable,
    calculate_total_interest,
)


class TestMonthlyDue(unittest.TestCase):

    def test_amortized_installment(self):
        # 8000 financed over 6 periods at 5% per period
        self.assertEqual(calculate_monthly_due(10000, 2000, 6, 5), Decimal('1576.14'))

    def test_single_term(self):
        self.assertEqual(calculate_monthly_due(1000, 0, 1, 10), Decimal('1100.00'))

    def test_zero_rate_divides_evenly(self):
        self.assertEqual(calculate_monthly_due(12000, 0, 12, 0), Decimal('1000.00'))
        self.assertEqual(calculate_monthly_due(1000, 0, 3, 0), Decimal('333.33'))
        self.assertEqual(calculate_monthly_due(9000, 1500, 5, 0.0), Decimal('1500.00'))

    def test_interest_is_never_negative(self):
        cases = [
            (10000, 2000, 6, 5),
            (2500, 0, 24, 0.5),
            (100, 99, 3, 12),
            (75000.50, 5000.25, 36, 1.75),
        ]
        for total_price, downpayment, terms, rate in cases:
            monthly_due = calculate_monthly_due(total_price, downpayment, terms, rate)
            financed = Decimal(str(total_price)) - Decimal(str(downpayment))
            self.assertGreaterEqual(monthly_due * terms, financed)

    def test_accepts_decimal_and_string_inputs(self):
        self.assertEqual(
            calculate_monthly_due(Decimal('10000'), '2000', 6, Decimal('5')),
            Decimal('1576.14'),
        )

    def test_rejects_non_positive_terms(self):
        with self.assertRaises(InvalidInputError):
            calculate_monthly_due(1000, 0, 0, 5)
        with self.assertRaises(InvalidInputError):
            calculate_monthly_due(1000, 0, -3, 5)

    def test_rejects_fractional_terms(self):
        with self.assertRaises(TypeError):
            calculate_monthly_due(1000, 0, 1.5, 5)

    def test_rejects_downpayment_covering_price(self):
        with self.assertRaises(InvalidInputError):
            calculate_monthly_due(1000, 1000, 6, 5)
        with self.assertRaises(InvalidInputError):
            calculate_monthly_due(1000, 1200, 6, 5)

    def test_rejects_negative_values(self):
        with self.assertRaises(InvalidInputError):
            calculate_monthly_due(1000, -1, 6, 5)
        with self.assertRaises(InvalidInputError):
            calculate_monthly_due(1000, 0, 6, -1)
        with self.assertRaises(InvalidInputError):
            calculate_monthly_due(0, 0, 6, 5)

    def test_invalid_input_is_a_value_error(self):
        with self.assertRaises(ValueError):
            calculate_monthly_due(1000, 0, 0, 5)


class TestTotals(unittest.TestCase):

    def test_total_interest(self):
        self.assertEqual(calculate_total_interest(10000, 2000, 6, 5), Decimal('1456.84'))

    def test_total_interest_without_rate(self):
        self.assertEqual(calculate_total_interest(12000, 0, 12, 0), Decimal('0.00'))

    def test_total_amount_payable(self):
        self.assertEqual(calculate_total_amount_payable(10000, 2000, 6, 5), Decimal('11456.84'))

    def test_total_interest_absorbs_rounding(self):
        # 1000 / 3 rounds down to 333.33; the schedule still totals the financed amount
        self.assertEqual(calculate_total_interest(1000, 0, 3, 0), Decimal('0.00'))
        self.assertEqual(calculate_total_amount_payable(1000, 0, 3, 0), Decimal('1000.00'))

    def test_loan_summary(self):
        summary = calculate_loan_summary(10000, 2000, 6, 5, first_due_date='2024-01-15')
        self.assertEqual(summary.financed_amount, Decimal('8000.00'))
        self.assertEqual(summary.monthly_due, Decimal('1576.14'))
        self.assertEqual(summary.final_installment, Decimal('1576.14'))
        self.assertEqual(summary.total_interest, Decimal('1456.84'))
        self.assertEqual(summary.total_amount_payable, Decimal('11456.84'))
        self.assertEqual(summary.end_date, dt.date(2024, 6, 15))

    def test_loan_summary_without_schedule(self):
        summary = calculate_loan_summary(12000, 0, 12, 0)
        self.assertIsNone(summary.end_date)


class TestFinalInstallment(unittest.TestCase):

    def test_final_installment_takes_rounding_residual(self):
        self.assertEqual(calculate_final_installment(10000, 0, 3, 0), Decimal('3333.34'))
        self.assertEqual(calculate_final_installment(1000, 0, 6, 0), Decimal('166.65'))

    def test_final_installment_equals_monthly_due_when_exact(self):
        self.assertEqual(calculate_final_installment(12000, 0, 12, 0), Decimal('1000.00'))
        self.assertEqual(calculate_final_installment(10000, 2000, 6, 5), Decimal('1576.14'))

    def test_schedule_adds_up_to_total_payable(self):
        cases = [
            (10000, 0, 3, 0),
            (10000, 2000, 6, 5),
            (2500, 0, 24, 0.5),
            (75000.50, 5000.25, 36, 1.75),
        ]
        for total_price, downpayment, terms, rate in cases:
            monthly_due = calculate_monthly_due(total_price, downpayment, terms, rate)
            final = calculate_final_installment(total_price, downpayment, terms, rate)
            self.assertEqual(
                monthly_due * (terms - 1) + final + Decimal(str(downpayment)).quantize(Decimal('0.01')),
                calculate_total_amount_payable(total_price, downpayment, terms, rate),
            )


class TestEndDate(unittest.TestCase):

    def test_end_date_keeps_day_of_month(self):
        self.assertEqual(calculate_end_date(dt.date(2024, 1, 31), 3), dt.date(2024, 3, 31))

    def test_end_date_clamps_to_short_month(self):
        self.assertEqual(calculate_end_date(dt.date(2024, 1, 31), 2), dt.date(2024, 2, 29))
        self.assertEqual(calculate_end_date(dt.date(2023, 1, 31), 2), dt.date(2023, 2, 28))

    def test_end_date_accepts_datetime(self):
        self.assertEqual(calculate_end_date(dt.datetime(2024, 5, 10, 14, 30), 1), dt.date(2024, 5, 10))


if __name__ == '__main__':
    unittest.main()
