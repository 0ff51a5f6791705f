"""
图片相关度评分测试
"""

from tourcms.search.relevance import aspect_score, calculate_relevance, keyword_score, resolution_score


def test_full_score_is_capped_at_100():
    image = {"width": 4000, "height": 2500, "source": "wikimedia", "alt": "Great Wall"}
    assert calculate_relevance(image, "great wall") == 100


def test_combined_score():
    image = {"width": 2000, "height": 1250, "source": "unsplash", "alt": "The Great Wall of China"}
    # 20 分辨率 + 25 关键词 + 22 来源 + 25 宽高比
    assert calculate_relevance(image, "Great Wall") == 92


def test_missing_dimensions_use_defaults():
    image = {"source": "somewhere"}
    # 800x600: 5 分辨率 + 0 关键词 + 10 来源 + 25 宽高比
    assert calculate_relevance(image, "pagoda") == 40


def test_partial_keyword_match_rounds_half_up():
    assert keyword_score({"alt": "old wall"}, "great wall") == 13
    assert keyword_score({"tags": "temple, great"}, "great wall") == 13
    assert keyword_score({"photographer": "Jane"}, "pagoda") == 0


def test_resolution_bands():
    assert resolution_score(2000, 2000) == 25
    assert resolution_score(1000, 1000) == 15
    assert resolution_score(800, 700) == 10
    assert resolution_score(640, 480) == 5


def test_aspect_bands():
    assert aspect_score(1600, 1000) == 25
    assert aspect_score(1900, 1000) == 20
    assert aspect_score(1000, 1000) == 15
    assert aspect_score(600, 1000) == 10
