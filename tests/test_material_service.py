from io import BytesIO

import pandas as pd

from conftest import TEST_PRICES


def _seed(injection_service):
    may = injection_service.create_order({"order_number": "PO-A1", "doc_number": "D-100", "date": "2024-05-03",
                                          "workshop": "一车间"},
                                         [{"material": "A", "actual_weight_kg": 10, "actual_amount_hkd": 50,
                                           "mold_id": "M-1", "mold_name": "车身", "injection_cost": 120},
                                          {"material": "C", "actual_weight_kg": "5", "actual_amount_hkd": 20,
                                           "mold_id": "M-2"}])
    june = injection_service.create_order({"order_number": "PO-B2", "doc_number": "d-200", "date": "2024-06-11"},
                                          [{"material": "A", "actual_weight_kg": 3, "actual_amount_hkd": 15},
                                           {"material": "", "actual_weight_kg": 99}])
    return may, june


def _by_material(stats):
    return {s["material"]: s for s in stats}


def test_get_and_replace_prices(material_service):
    assert material_service.get_prices() == TEST_PRICES

    new_prices = [{"material": "PP", "unit_price": 9.8, "notes": ""}]
    assert material_service.replace_prices(new_prices) == new_prices
    assert material_service.get_prices() == new_prices


def test_material_stats_aggregation(material_service, injection_service):
    """价格表 {A, B}；明细 A(10, 50) 与价格表外的 C(5, 20)"""
    injection_service.create_order({}, [{"material": "A", "actual_weight_kg": 10, "actual_amount_hkd": 50},
                                        {"material": "C", "actual_weight_kg": 5, "actual_amount_hkd": 20}])

    stats = material_service.get_material_stats()
    assert [s["material"] for s in stats] == ["A", "B", "C"]

    by_material = _by_material(stats)
    assert (by_material["A"]["total_actual_weight"], by_material["A"]["total_amount"]) == (10, 50)
    assert (by_material["B"]["total_actual_weight"], by_material["B"]["total_amount"]) == (0, 0)
    assert (by_material["C"]["total_actual_weight"], by_material["C"]["total_amount"]) == (5, 20)
    assert by_material["C"]["unit_price"] == 0
    assert by_material["C"]["seq"] == 3
    assert by_material["A"]["unit_price"] == 2.5
    assert by_material["A"]["notes"] == "原料A"


def test_material_stats_numeric_material_uses_price_entry(material_service, injection_service):
    material_service.replace_prices([{"material": "123", "unit_price": 5, "notes": ""}])
    injection_service.create_order({}, [{"material": 123, "actual_weight_kg": 4, "actual_amount_hkd": 20}])

    stats = material_service.get_material_stats()
    assert len(stats) == 1
    assert stats[0]["material"] == "123"
    assert stats[0]["unit_price"] == 5
    assert (stats[0]["total_actual_weight"], stats[0]["total_amount"]) == (4, 20)


def test_material_stats_tolerates_unhashable_material(material_service, injection_service):
    injection_service.create_order({}, [{"material": ["A"], "actual_weight_kg": 2},
                                        {"material": {"name": "A"}, "actual_weight_kg": 1}])

    stats = material_service.get_material_stats()
    assert [s["material"] for s in stats] == ["A", "B", "['A']", "{'name': 'A'}"]
    assert _by_material(stats)["['A']"]["total_actual_weight"] == 2
    assert _by_material(stats)["A"]["total_actual_weight"] == 0


def test_material_stats_only_counts_injection(material_service, slush_service):
    slush_service.create_order({}, [{"material": "A", "actual_weight_kg": 10}])
    assert _by_material(material_service.get_material_stats())["A"]["total_actual_weight"] == 0


def test_material_stats_month_filter(material_service, injection_service):
    _seed(injection_service)

    stats = _by_material(material_service.get_material_stats(month="2024-06"))
    assert stats["A"]["total_actual_weight"] == 3
    assert "C" not in stats

    stats = _by_material(material_service.get_material_stats())
    assert stats["A"]["total_actual_weight"] == 13
    assert stats["C"]["total_actual_weight"] == 5


def test_material_stats_order_number_search(material_service, injection_service):
    _seed(injection_service)

    # 单据编号不区分大小写
    stats = _by_material(material_service.get_material_stats(order_number="D-200"))
    assert stats["A"]["total_amount"] == 15

    stats = _by_material(material_service.get_material_stats(month="2024-05", order_number="b2"))
    assert stats["A"]["total_amount"] == 0


def test_injection_costs(material_service, injection_service):
    may, _ = _seed(injection_service)

    rows = material_service.get_injection_costs(month="2024-05")
    assert len(rows) == 2
    assert rows[0] == {
        "order_number": "PO-A1", "doc_number": "D-100", "date": "2024-05-03", "workshop": "一车间",
        "mold_id": "M-1", "mold_name": "车身", "injection_cost": 120, "notes": "",
    }
    assert rows[1]["mold_id"] == "M-2"
    assert rows[1]["injection_cost"] is None

    assert len(material_service.get_injection_costs()) == 4


def test_export_material_stats_excel(material_service, injection_service):
    _seed(injection_service)
    content = material_service.export_material_stats_excel()

    df = pd.read_excel(BytesIO(content), sheet_name="原料用量汇总")
    assert list(df.columns) == ["序号", "原料", "单价", "备注", "实际用量(kg)", "实际金额(HKD)"]
    assert list(df["原料"]) == ["A", "B", "C"]


def test_export_injection_costs_excel_empty(material_service):
    content = material_service.export_injection_costs_excel(month="2030-01")
    df = pd.read_excel(BytesIO(content), sheet_name="啤办费用汇总")
    assert df.empty
    assert "模具编号" in df.columns
