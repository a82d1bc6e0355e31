import requests
import json
import sys

BASE_URL = "http://localhost:8000"

def scan(repo_url):
    print(f"Scanning {repo_url}...")
    r = requests.post(f"{BASE_URL}/repo/scan", json={"url": repo_url}, timeout=120)
    print(f"Status: {r.status_code}")
    if r.status_code != 200:
        print(f"❌ Scan failed: {r.text}")
        return None

    data = r.json()
    print(f"Files: {data['total_files']} (analyzed {data['analyzed_files']})")
    print(f"Dependencies: {data['total_dependencies']}")
    return data

def inspect_busiest(graph):
    # File with the most outgoing edges
    counts = {}
    for link in graph["links"]:
        counts[link["source"]] = counts.get(link["source"], 0) + 1
    if not counts:
        print("No dependencies found, nothing to inspect")
        return

    index = max(counts, key=counts.get)
    sid = graph["session_id"]
    r = requests.get(f"{BASE_URL}/repo/{sid}/files/{index}", timeout=30)
    print(f"\n=== FILE {index} ===")
    print(f"Status: {r.status_code}")
    if r.status_code != 200:
        print(r.text)
        return

    data = r.json()
    print(f"{data['path']}: {data['line_count']} lines, {data['byte_size']} bytes")
    for dep in data["dependencies"]:
        print(f"  line {dep['line']}: {dep['statement']}  →  #{dep['target']}")

    r = requests.get(f"{BASE_URL}/repo/{sid}/files/{index}/usages", timeout=30)
    print("\n=== USAGES ===")
    print(json.dumps(r.json(), indent=2))

if __name__ == "__main__":
    url = sys.argv[1] if len(sys.argv) > 1 else "https://github.com/expressjs/express"
    graph = scan(url)
    if graph:
        inspect_busiest(graph)
        print("✅ Smoke run complete")
