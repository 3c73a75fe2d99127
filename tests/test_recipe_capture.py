import json

import pytest

from recipe_capture import main, markdown_filename, read_source


@pytest.fixture(autouse=True)
def no_env_config(monkeypatch):
    monkeypatch.delenv("OPENAI_API_KEY", raising=False)
    monkeypatch.delenv("RECIPE_RULES_FILE", raising=False)
    monkeypatch.setattr("recipe_capture.load_dotenv", lambda: None)


def test_read_source_inline_and_file(tmp_path):
    assert read_source("text://【材料】牛肉") == "【材料】牛肉"

    path = tmp_path / "post.txt"
    path.write_text("做法：\n1. 切牛肉", encoding="utf-8")
    assert read_source(str(path)) == "做法：\n1. 切牛肉"


def test_read_source_missing_file_exits(tmp_path):
    with pytest.raises(SystemExit):
        read_source(str(tmp_path / "missing.txt"))


def test_markdown_filename_is_path_safe():
    assert markdown_filename("a/b") == "a-b.md"
    assert markdown_filename("a\\b\x00c") == "a-b-c.md"
    assert markdown_filename("x" * 100) == "x" * 80 + ".md"


def test_main_prints_json(capsys):
    main(["text://【材料】牛肉，豆腐\n做法：\n1. 切牛肉\n2. 炒豆腐", "--json"])

    data = json.loads(capsys.readouterr().out)
    assert data["ingredients"] == ["牛肉", "豆腐"]
    assert data["steps"] == ["切牛肉", "炒豆腐"]
    assert data["cuisine"] == "Western"


def test_main_uses_youtube_thumbnail_for_image(capsys):
    main(["text://pasta night", "--json", "--url", "https://youtu.be/abc123"])

    data = json.loads(capsys.readouterr().out)
    assert data["image"] == "https://img.youtube.com/vi/abc123/maxresdefault.jpg"
    assert data["title"] == "abc123"
    assert data["cuisine"] == "Italian"


def test_main_writes_markdown(tmp_path, capsys):
    source = tmp_path / "post.txt"
    source.write_text("快手晚餐 —— 番茄炒蛋\n【材料】番茄，鸡蛋\n做法：\n1. 番茄切块备用\n2. 鸡蛋炒熟后混合", encoding="utf-8")
    out_dir = tmp_path / "out"

    main([str(source), "--out-dir", str(out_dir)])

    md_path = out_dir / "番茄炒蛋.md"
    assert md_path.exists()
    content = md_path.read_text(encoding="utf-8")
    assert content.startswith("# 番茄炒蛋\n")
    assert "- 番茄\n- 鸡蛋\n" in content
    assert "1. 番茄切块备用\n2. 鸡蛋炒熟后混合\n" in content
    assert "Done." in capsys.readouterr().out


def test_main_reads_rules_file(tmp_path, capsys):
    rules = tmp_path / "rules.json"
    rules.write_text(json.dumps({"cuisine_keywords": {"Korean": ["bibimbap"]}}), encoding="utf-8")

    main(["text://bibimbap bowl", "--json", "--rules", str(rules)])

    assert json.loads(capsys.readouterr().out)["cuisine"] == "Korean"


def test_main_rejects_invalid_rules_file(tmp_path):
    rules = tmp_path / "rules.json"
    rules.write_text(json.dumps({"nope": []}), encoding="utf-8")

    with pytest.raises(SystemExit):
        main(["text://anything", "--json", "--rules", str(rules)])
