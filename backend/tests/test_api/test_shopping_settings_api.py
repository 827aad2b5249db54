"""
Tests for /api/shopping-list and /api/settings endpoints
"""
from unittest.mock import patch

from app.domain.inventory import InventoryItem
from app.domain.settings import SettingValue
from app.domain.shopping_list import ShoppingListItem


class TestShoppingListApi:

    @patch('app.api.shopping_list.ShoppingListRepository')
    def test_list(self, mock_repo_cls, client, auth_headers):
        mock_repo_cls.return_value.find_all.return_value = [ShoppingListItem(id=1, item_name="Milk")]

        response = client.get("/api/shopping-list", headers=auth_headers)

        assert response.status_code == 200
        assert response.json()[0]["priority"] == "Medium"
        assert response.json()[0]["purchased"] is False

    def test_add_requires_name(self, client, auth_headers):
        response = client.post("/api/shopping-list", json={"quantity": 3}, headers=auth_headers)

        assert response.status_code == 400
        assert response.json() == {"error": "Item name is required"}

    @patch('app.api.shopping_list.ShoppingListRepository')
    def test_add(self, mock_repo_cls, client, auth_headers):
        mock_repo_cls.return_value.create.return_value = ShoppingListItem(id=2, item_name="Eggs", quantity=12)

        response = client.post("/api/shopping-list", json={"item_name": "Eggs", "quantity": 12}, headers=auth_headers)

        assert response.status_code == 201
        assert response.json()["quantity"] == 12

    @patch('app.api.shopping_list.InventoryService')
    def test_generate(self, mock_service_cls, client, auth_headers):
        mock_service_cls.return_value.generate_shopping_list.return_value = [
            ShoppingListItem(id=3, item_name="Milk", quantity=28, priority="Urgent")
        ]

        response = client.post("/api/shopping-list/generate", headers=auth_headers)

        assert response.status_code == 201
        assert response.json()[0]["priority"] == "Urgent"

    @patch('app.api.shopping_list.ShoppingListRepository')
    def test_mark_purchased(self, mock_repo_cls, client, auth_headers):
        mock_repo_cls.return_value.mark_purchased.return_value = ShoppingListItem(
            id=1, item_name="Milk", purchased=True
        )

        response = client.put("/api/shopping-list/1/purchase", headers=auth_headers)

        assert response.status_code == 200
        assert response.json()["purchased"] is True

    @patch('app.api.shopping_list.ShoppingListRepository')
    def test_mark_purchased_not_found(self, mock_repo_cls, client, auth_headers):
        mock_repo_cls.return_value.mark_purchased.return_value = None

        response = client.put("/api/shopping-list/1/purchase", headers=auth_headers)

        assert response.status_code == 404

    @patch('app.api.shopping_list.ShoppingListRepository')
    def test_delete_not_found(self, mock_repo_cls, client, auth_headers):
        mock_repo_cls.return_value.delete.return_value = False

        response = client.delete("/api/shopping-list/1", headers=auth_headers)

        assert response.status_code == 404
        assert response.json() == {"error": "Item not found"}


class TestSettingsApi:

    @patch('app.api.settings.SettingsRepository')
    def test_get_settings(self, mock_repo_cls, client, auth_headers):
        mock_repo_cls.return_value.find_all.return_value = {
            "low_stock_threshold": SettingValue(value=10.0, description="Low stock threshold", type="number")
        }

        response = client.get("/api/settings", headers=auth_headers)

        assert response.status_code == 200
        assert response.json()["low_stock_threshold"]["value"] == 10.0

    @patch('app.api.settings.SettingsRepository')
    def test_update_setting(self, mock_repo_cls, client, auth_headers):
        mock_repo_cls.return_value.update.return_value = True

        response = client.put("/api/settings/low_stock_threshold", json={"value": 15}, headers=auth_headers)

        assert response.status_code == 200
        mock_repo_cls.return_value.update.assert_called_once_with("low_stock_threshold", 15)

    def test_update_setting_requires_value(self, client, auth_headers):
        response = client.put("/api/settings/low_stock_threshold", json={}, headers=auth_headers)

        assert response.status_code == 400
        assert response.json() == {"error": "Value is required"}

    @patch('app.api.settings.SettingsRepository')
    def test_update_unknown_setting(self, mock_repo_cls, client, auth_headers):
        mock_repo_cls.return_value.update.return_value = False

        response = client.put("/api/settings/nope", json={"value": 1}, headers=auth_headers)

        assert response.status_code == 404
        assert response.json() == {"error": "Setting not found"}

    @patch('app.api.settings.InventoryRepository')
    def test_categories(self, mock_repo_cls, client, auth_headers):
        mock_repo_cls.return_value.get_categories.return_value = ["Bakery", "Dairy"]

        response = client.get("/api/settings/categories", headers=auth_headers)

        assert response.json() == ["Bakery", "Dairy"]

    @patch('app.api.settings.SettingsRepository')
    @patch('app.api.settings.InventoryRepository')
    def test_reorder_calculation(self, mock_inventory_cls, mock_settings_cls, client, auth_headers):
        mock_inventory_cls.return_value.find_by_id.return_value = InventoryItem(
            id=1, description="Milk", remaining_stock=4, sales_weekly=14, unit_cost=3.0, vendor_lead_time_days=5
        )
        mock_settings_cls.return_value.get_numbers.return_value = {"reorder_multiplier": 3.0}

        response = client.get("/api/settings/reorder-calculation/1", headers=auth_headers)

        assert response.status_code == 200
        body = response.json()
        assert body["reorderQuantity"] == 42
        assert body["leadTimeDays"] == 5
        assert body["reorderPoint"] == 24
        assert body["priority"] == "High"
        assert body["estimatedCost"] == 126.0
        assert body["parameters"]["reorderMultiplier"] == 3
        assert isinstance(body["parameters"]["reorderMultiplier"], int)

    @patch('app.api.settings.InventoryRepository')
    def test_reorder_calculation_item_not_found(self, mock_repo_cls, client, auth_headers):
        mock_repo_cls.return_value.find_by_id.return_value = None

        response = client.get("/api/settings/reorder-calculation/1", headers=auth_headers)

        assert response.status_code == 404

    @patch('app.api.settings.InventoryRepository')
    def test_validate_import(self, mock_repo_cls, client, auth_headers):
        mock_repo_cls.return_value.find_existing_upcs.return_value = {"111"}

        response = client.post("/api/settings/validate-import", json={"items": [
            {"description": "Milk", "category": "Dairy", "item_upc": "111"},
            {"description": "Eggs", "category": "Dairy", "item_upc": "222"},
        ]}, headers=auth_headers)

        assert response.status_code == 200
        body = response.json()
        assert body["summary"]["valid"] == 1
        assert body["invalid"][0]["errors"] == ["UPC already exists in inventory"]

    @patch('app.api.settings.InventoryRepository')
    def test_validate_import_flags_null_unit_cost(self, mock_repo_cls, client, auth_headers):
        mock_repo_cls.return_value.find_existing_upcs.return_value = set()

        response = client.post("/api/settings/validate-import", json={"items": [
            {"description": "Milk", "category": "Dairy", "unit_cost": None},
        ]}, headers=auth_headers)

        assert response.status_code == 200
        assert response.json()["invalid"][0]["errors"] == ["Unit cost must be a valid number"]

    def test_validate_import_requires_items(self, client, auth_headers):
        response = client.post("/api/settings/validate-import", json={}, headers=auth_headers)

        assert response.status_code == 400
        assert response.json() == {"error": "Items array is required"}
