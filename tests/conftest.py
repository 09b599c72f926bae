"""Shared fixtures: a small reference dataset in the upstream JSON shape."""

from __future__ import annotations

from typing import Any

import pytest

DATASET_URL = "https://data.litedata.test/CityCode.json"

SAMPLE_DATASET: dict[str, list[list[str]]] = {
    "东城区": [["110101", "东城区", "北京市"], ["310101", "黄浦区", "上海市"]],
    "海淀区": [["110108", "海淀区", "北京市"]],
    "朝阳": [
        ["110105", "朝阳区", "北京市"],
        ["220104", "朝阳区", "吉林省"],
        ["211300", "朝阳市", "辽宁省"],
    ],
    "南京": [["320100", "南京市", "江苏省"]],
    "鼓楼": [["320106", "鼓楼区", "江苏省"], ["350102", "鼓楼区", "福建省"]],
    "阿拉善": [["152900", "阿拉善盟", "内蒙古自治区"]],
    "香港": [["810000", "香港"]],
}


@pytest.fixture()
def sample_dataset() -> dict[str, Any]:
    return SAMPLE_DATASET
