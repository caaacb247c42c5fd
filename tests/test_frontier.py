import re

from site_clipper.crawler.frontier import CrawlPolicy, Frontier
from site_clipper.crawler.models import FrontierEntry

START = "https://docs.test/start"


def test_policy_same_domain():
    policy = CrawlPolicy(START)
    assert policy.allows("https://docs.test/other")
    assert policy.allows("http://DOCS.test:8080/x")
    assert not policy.allows("https://blog.docs.test/")
    assert not policy.allows("https://elsewhere.test/")


def test_policy_cross_domain_when_disabled():
    policy = CrawlPolicy(START, same_domain_only=False)
    assert policy.allows("https://elsewhere.test/")


def test_policy_empty_host_never_matches():
    policy = CrawlPolicy("not a url")
    assert not policy.allows("also not a url")


def test_exclude_wins_over_include():
    policy = CrawlPolicy(
        START,
        exclude_patterns=[re.compile(r"/private/")],
        include_patterns=[re.compile(r"/docs/")],
    )
    assert policy.allows("https://docs.test/docs/intro")
    assert not policy.allows("https://docs.test/docs/private/keys")
    assert not policy.allows("https://docs.test/blog/post")


def test_include_patterns_use_search():
    policy = CrawlPolicy(START, include_patterns=[re.compile(r"guide")])
    assert policy.allows("https://docs.test/user-guide/setup")


def test_push_normalizes_and_pops_fifo():
    frontier = Frontier(2, CrawlPolicy(START))
    frontier.push("https://Docs.test/A/?x=1", 0)
    frontier.push("https://docs.test/b#frag", 1)

    assert len(frontier) == 2
    assert frontier.pop() == FrontierEntry("https://docs.test/a", 0)
    assert frontier.pop() == FrontierEntry("https://docs.test/b", 1)
    assert not frontier


def test_push_refuses_visited():
    frontier = Frontier(2, CrawlPolicy(START))
    frontier.mark_visited("https://docs.test/a")

    assert frontier.push("https://docs.test/A/", 1) is False
    assert frontier.extend(["https://docs.test/a#x", "https://docs.test/c"], 1) == 1


def test_should_skip_reasons():
    frontier = Frontier(1, CrawlPolicy(START))
    frontier.mark_visited("https://docs.test/seen")

    assert frontier.should_skip(FrontierEntry("https://docs.test/seen", 0)) == "visited"
    assert frontier.should_skip(FrontierEntry("https://docs.test/deep", 2)) == "too deep"
    assert frontier.should_skip(FrontierEntry("https://other.test/", 1)) == "policy"
    assert frontier.should_skip(FrontierEntry("https://docs.test/fine", 1)) is None


def test_visited_urls_keep_visit_order():
    frontier = Frontier(1, CrawlPolicy(START))
    for url in ("https://docs.test/b", "https://docs.test/a", "https://docs.test/b"):
        frontier.mark_visited(url)
    assert frontier.visited_urls == ["https://docs.test/b", "https://docs.test/a"]
