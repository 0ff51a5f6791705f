"""
通过API批量触发景点研究（需要服务已启动）
"""

import time
import argparse

import requests


def research_day(api_base, day):
    """调用景点研究API"""
    response = requests.post(f"{api_base}/api/poi/research/{day}", timeout=600)
    if response.status_code == 200:
        return response.json()
    raise Exception(f"API调用失败: {response.status_code}, {response.text}")


def main():
    parser = argparse.ArgumentParser(description="批量研究所有天的景点")
    parser.add_argument("--api-base", default="http://localhost:8000")
    parser.add_argument("--first", type=int, default=0, help="起始天数")
    parser.add_argument("--last", type=int, default=15, help="结束天数（含）")
    parser.add_argument("--delay", type=float, default=2.0, help="每天之间的等待秒数")
    args = parser.parse_args()

    failed = []
    for day in range(args.first, args.last + 1):
        print(f"研究第 {day} 天...")
        try:
            result = research_day(args.api_base, day)
            print(f"  ✓ {len(result.get('pois') or [])} 个景点")
        except Exception as e:
            print(f"  ✗ 失败: {e}")
            failed.append(day)
        time.sleep(args.delay)

    print(f"完成！失败: {failed or '无'}")


if __name__ == "__main__":
    main()
