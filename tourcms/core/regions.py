"""
目的地区域数据
区域划分、路线坐标、地点坐标表（网站、地图和PDF共用）
"""

from typing import Dict, List


DESTINATION_REGIONS: List[Dict] = [
    {
        "id": "xian",
        "name": {"en": "Xi'an", "cn": "西安"},
        "days": [1, 2, 3, 4],
        "coordinates": [34.3416, 108.9398],
        "description": {
            "en": "Ancient capital of China, home to the legendary Terracotta Warriors and 3,000 years of history",
            "cn": "中国古都，拥有传奇的兵马俑和3000年历史",
        },
        "color": "#D84315",
    },
    {
        "id": "beijing",
        "name": {"en": "Beijing", "cn": "北京"},
        "days": [5, 6],
        "coordinates": [39.9042, 116.4074],
        "description": {
            "en": "China's capital city, featuring the iconic Great Wall and imperial Forbidden City",
            "cn": "中国首都，拥有标志性的长城和皇家故宫",
        },
        "color": "#1976D2",
    },
    {
        "id": "lushan",
        "name": {"en": "Lushan Region", "cn": "庐山地区"},
        "days": [7, 8, 9, 10],
        "coordinates": [29.5628, 115.9928],
        "description": {
            "en": "Mystical mountain landscapes, traditional villages, and the beautiful countryside of Wuyuan",
            "cn": "神秘的山景、传统村落和婺源美丽的乡村",
        },
        "color": "#388E3C",
    },
    {
        "id": "shangrao",
        "name": {"en": "Shangrao", "cn": "上饶"},
        "days": [11],
        "coordinates": [28.4549, 117.9432],
        "description": {
            "en": "Gateway to Mount Sanqing, featuring stunning natural scenery and ancient Taoist heritage",
            "cn": "三清山门户，拥有壮丽的自然风光和古老的道教文化",
        },
        "color": "#FF7043",
    },
    {
        "id": "taishan",
        "name": {"en": "Mount Tai Region", "cn": "泰山地区"},
        "days": [12, 13, 14],
        "coordinates": [36.2565, 117.1009],
        "description": {
            "en": "The sacred Mount Tai, foremost of China's Five Great Mountains, and birthplace of Confucius",
            "cn": "神圣的泰山，五岳之首，孔子故里",
        },
        "color": "#7B1FA2",
    },
    {
        "id": "qingdao",
        "name": {"en": "Qingdao", "cn": "青岛"},
        "days": [15],
        "coordinates": [36.0671, 120.3826],
        "description": {
            "en": "Beautiful coastal city, departure point for your journey home",
            "cn": "美丽的海滨城市，返程起点",
        },
        "color": "#00796B",
    },
]

# [纬度, 经度]
ROUTE_COORDINATES: List[List[float]] = [
    [34.3416, 108.9398],  # Xi'an
    [39.9042, 116.4074],  # Beijing
    [29.5628, 115.9928],  # Lushan
    [29.2481, 117.8614],  # Wuyuan
    [36.1955, 117.1209],  # Tai'an
    [36.0671, 120.3826],  # Qingdao
]

# [经度, 纬度]，按子串匹配，顺序即优先级
LOCATION_COORDINATES: Dict[str, List[float]] = {
    "heathrow": [-0.4543, 51.4700],
    "xi'an": [108.9398, 34.3416],
    "xian": [108.9398, 34.3416],
    "beijing": [116.4074, 39.9042],
    "lushan": [115.9927, 29.5627],
    "jiujiang": [115.9930, 29.7051],
    "jingdezhen": [117.1784, 29.2686],
    "wuyuan": [117.8613, 29.2486],
    "wangxian": [117.9, 29.4],
    "shangrao": [117.9432, 28.4549],
    "tai'an": [117.1290, 36.1949],
    "mount tai": [117.1070, 36.2561],
    "qufu": [116.9914, 35.5963],
    "qingdao": [120.3826, 36.0671],
}

DEFAULT_COORDINATES = LOCATION_COORDINATES["xi'an"]


def get_region(day: int) -> str:
    """天数到区域ID"""
    if day <= 4:
        return "xian"
    if day <= 6:
        return "beijing"
    if day <= 10:
        return "lushan"
    if day == 11:
        return "shangrao"
    if day <= 14:
        return "taishan"
    return "qingdao"


def get_coordinates(location: str) -> List[float]:
    """地点名到 [经度, 纬度]，未知地点默认西安"""
    loc = (location or "").lower()
    for key, value in LOCATION_COORDINATES.items():
        if key in loc:
            return list(value)
    return list(DEFAULT_COORDINATES)
