"""
Tests for reorder quantity, reorder point and priority
"""
from app.services.reorder_service import calculate_reorder, reorder_priority, round_half_up


class TestRoundHalfUp:

    def test_half_goes_up(self):
        assert round_half_up(2.5) == 3
        assert round_half_up(0.125, 2) == 0.13

    def test_other_values_round_normally(self):
        assert round_half_up(2.4) == 2
        assert round_half_up(10.004, 2) == 10.0


class TestReorderPriority:

    def test_priority_bands(self):
        assert reorder_priority(0, 10) == "Urgent"
        assert reorder_priority(5, 10) == "High"
        assert reorder_priority(8, 10) == "Medium"
        assert reorder_priority(11, 10) == "Low"


class TestCalculateReorder:

    def test_defaults(self):
        # weekly 14 -> daily 2; safety 7 days -> 14; lead time 3 days -> 6
        calc = calculate_reorder(1, "Milk", remaining_stock=25, sales_weekly=14, unit_cost=4.5)

        assert calc.reorderQuantity == 28
        assert calc.safetyStock == 14
        assert calc.reorderPoint == 20
        assert calc.leadTimeDays == 3
        assert calc.priority == "Low"
        assert calc.estimatedCost == 126.0
        assert calc.parameters == {
            "reorderMultiplier": 2,
            "minimumReorder": 20,
            "safetyStockDays": 7,
            "leadTimeDays": 3,
        }

    def test_minimum_reorder_applies_to_slow_sellers(self):
        calc = calculate_reorder(2, "Saffron", remaining_stock=3, sales_weekly=1, unit_cost=10)

        assert calc.reorderQuantity == 20
        assert calc.safetyStock == 1
        assert calc.reorderPoint == 2
        assert calc.estimatedCost == 200.0

    def test_vendor_lead_time_and_settings_override_defaults(self):
        settings = {"reorder_multiplier": 3, "minimum_reorder_quantity": 10, "safety_stock_days": 14}

        calc = calculate_reorder(
            3, "Bread", remaining_stock=10, sales_weekly=7, unit_cost=2,
            vendor_lead_time_days=5, settings=settings,
        )

        assert calc.reorderQuantity == 21
        assert calc.safetyStock == 14
        assert calc.reorderPoint == 19
        assert calc.leadTimeDays == 5
        assert calc.priority == "Medium"

    def test_zero_settings_fall_back_to_defaults(self):
        calc = calculate_reorder(
            4, "Eggs", remaining_stock=0, sales_weekly=0, unit_cost=None,
            settings={"reorder_multiplier": 0, "minimum_reorder_quantity": None},
        )

        assert calc.reorderQuantity == 20
        assert calc.reorderPoint == 0
        assert calc.priority == "Urgent"
        assert calc.estimatedCost == 0.0

    def test_whole_number_settings_stay_integers(self):
        # Settings are parsed from text as floats
        settings = {"reorder_multiplier": 2.0, "minimum_reorder_quantity": 20.0, "safety_stock_days": 1.5}

        calc = calculate_reorder(6, "Pears", 5, 7, 1.0, vendor_lead_time_days=4, settings=settings)

        assert calc.parameters == {
            "reorderMultiplier": 2,
            "minimumReorder": 20,
            "safetyStockDays": 1.5,
            "leadTimeDays": 4,
        }
        assert isinstance(calc.parameters["reorderMultiplier"], int)
        assert isinstance(calc.parameters["minimumReorder"], int)
        assert isinstance(calc.leadTimeDays, int)

    def test_to_dict_uses_camel_case_keys(self):
        data = calculate_reorder(5, "Apples", 10, 14, 1.0).to_dict()

        assert data["itemId"] == 5
        assert data["description"] == "Apples"
        assert data["currentStock"] == 10
        assert data["weeklySales"] == 14
        assert {"reorderQuantity", "reorderPoint", "safetyStock", "priority", "estimatedCost"} <= set(data)
