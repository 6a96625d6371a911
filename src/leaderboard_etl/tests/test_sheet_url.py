from leaderboard_etl.sheet_url import normalize_sheet_url


def test_edit_link_with_fragment_gid():
    url = "https://docs.google.com/spreadsheets/d/abc123/edit#gid=42"
    assert normalize_sheet_url(url) == "https://docs.google.com/spreadsheets/d/abc123/export?format=csv&gid=42"


def test_query_gid_wins_over_fragment():
    url = "https://docs.google.com/spreadsheets/d/abc123/edit?gid=7#gid=42"
    assert normalize_sheet_url(url).endswith("gid=7")


def test_export_link_is_stable():
    url = "https://docs.google.com/spreadsheets/d/abc123/export?format=csv&gid=9"
    assert normalize_sheet_url(url) == url
    assert normalize_sheet_url(normalize_sheet_url(url)) == url


def test_without_gid():
    url = "https://docs.google.com/spreadsheets/d/abc123/edit"
    assert normalize_sheet_url(url) == "https://docs.google.com/spreadsheets/d/abc123/export?format=csv"


def test_not_a_url_passes_through():
    assert normalize_sheet_url("not a url") == "not a url"


def test_other_hosts_pass_through():
    url = "https://example.com/spreadsheets/d/abc123/edit"
    assert normalize_sheet_url(url) == url


def test_google_host_without_spreadsheet_path_passes_through():
    url = "https://docs.google.com/document/d/abc123/edit"
    assert normalize_sheet_url(url) == url


def test_broken_ipv6_host_passes_through():
    assert normalize_sheet_url("http://[::1/spreadsheets") == "http://[::1/spreadsheets"
