"""
Unit tests for BM25Scorer.
"""

import math

import pytest
from bm25hybrid.bm25.corpus import CorpusStatistics
from bm25hybrid.bm25.scorer import BM25Scorer
from bm25hybrid.bm25.tokenizer import tokenize
from bm25hybrid.models import Document

pytestmark = pytest.mark.unit


def make_scorer(documents, **kwargs):
    return BM25Scorer(CorpusStatistics(documents), **kwargs)


def naive_score(query, document, documents, k1=1.2, b=0.75):
    """Reference BM25: re-tokenizes document text for every query term"""
    n = len(documents)
    lengths = [len(tokenize(d.text)) for d in documents]
    avgdl = sum(lengths) / n
    dl = len(tokenize(document.text))
    score = 0.0
    for term in tokenize(query):
        tf = tokenize(document.text).count(term)
        df = sum(1 for d in documents if term in set(tokenize(d.text)))
        idf = math.log((n - df + 0.5) / (df + 0.5))
        score += idf * (tf * (k1 + 1)) / (tf + k1 * (1 - b + b * dl / avgdl))
    return score


class TestIdf:
    """Test signed Robertson-Sparck Jones IDF"""
    
    def test_common_term_negative(self, animal_documents):
        """Test terms in more than half of the corpus get negative idf"""
        scorer = make_scorer(animal_documents)
        assert scorer.idf("cat") == pytest.approx(math.log(1.5 / 2.5))
        assert scorer.idf("cat") == pytest.approx(-0.5108, abs=1e-4)
    
    def test_rare_term_positive(self, parrot_documents):
        """Test a term in one of four documents gets positive idf"""
        scorer = make_scorer(parrot_documents)
        assert scorer.idf("parrot") == pytest.approx(math.log(3.5 / 1.5))
        assert scorer.idf("parrot") == pytest.approx(0.847, abs=1e-3)
    
    def test_unseen_term_maximal(self, animal_documents):
        """Test df=0 gives the largest idf for the corpus size"""
        scorer = make_scorer(animal_documents)
        assert scorer.idf("zebra") == pytest.approx(math.log(3.5 / 0.5))
        assert scorer.idf("zebra") > scorer.idf("cat")


class TestScoreDocument:
    """Test raw per-document scores"""
    
    def test_worked_scenario_all_negative(self, animal_documents):
        """Test the three raw scores for query 'cat fish'"""
        scorer = make_scorer(animal_documents)
        query = tokenize("cat fish")
        
        assert scorer.score_document(query, 0) == pytest.approx(-0.569, abs=1e-3)
        assert scorer.score_document(query, 1) == pytest.approx(-1.165, abs=1e-3)
        assert scorer.score_document(query, 2) == pytest.approx(-0.679, abs=1e-3)
    
    def test_matches_naive_recomputation(self, parrot_documents):
        """Test cached term counts give the same scores as re-tokenizing"""
        scorer = make_scorer(parrot_documents)
        for query in ["cat fish", "parrot", "dog dog fish", "cat parrot zebra"]:
            for document in parrot_documents:
                expected = naive_score(query, document, parrot_documents)
                assert scorer.score_document(tokenize(query), document.id) == pytest.approx(expected)
    
    def test_zero_overlap_is_exactly_zero(self, animal_documents):
        """Test a document sharing no query terms scores exactly 0"""
        scorer = make_scorer(animal_documents)
        # doc 0 is "cat dog": no fish, and "cat" is not queried
        assert scorer.score_document(["fish", "zebra"], 0) == 0.0
    
    def test_repeated_query_terms_not_deduplicated(self, parrot_documents):
        """Test each occurrence of a query term adds its contribution"""
        scorer = make_scorer(parrot_documents)
        single = scorer.score_document(["parrot"], 3)
        double = scorer.score_document(["parrot", "parrot"], 3)
        assert double == pytest.approx(2 * single)
    
    def test_empty_query(self, animal_documents):
        """Test empty query scores 0"""
        scorer = make_scorer(animal_documents)
        assert scorer.score_document([], 1) == 0.0
    
    def test_empty_corpus_no_division_error(self):
        """Test scoring against an empty corpus does not divide by zero"""
        scorer = make_scorer([])
        assert scorer.score_document(["cat"], "missing") == 0.0
    
    def test_length_normalization(self):
        """Test that longer documents get penalized for the same tf"""
        documents = [
            Document("short", "rare word"),
            Document("long", "rare word and many other words here"),
            Document("x", "something else"),
            Document("y", "another thing"),
        ]
        scorer = make_scorer(documents)
        assert scorer.score_document(["rare"], "short") > scorer.score_document(["rare"], "long")
    
    def test_term_frequency_saturation(self):
        """Test k1 limits the gain from repeated occurrences"""
        documents = [
            Document("one", "rare filler filler filler"),
            Document("four", "rare rare rare rare"),
            Document("x", "other text here now"),
            Document("y", "more text here now"),
            Document("z", "a b c d"),
            Document("w", "e f g h"),
        ]
        scorer = make_scorer(documents, k1=1.2)
        low = scorer.score_document(["rare"], "one")
        high = scorer.score_document(["rare"], "four")
        assert high > low
        assert high < low * 4
    
    def test_upper_bound(self, parrot_documents):
        """Test (k1 + 1) × idf bounds a single term contribution"""
        scorer = make_scorer(parrot_documents)
        assert scorer.upper_bound("parrot") == pytest.approx(2.2 * scorer.idf("parrot"))
        assert scorer.score_term("parrot", 3) < scorer.upper_bound("parrot")
        assert scorer.upper_bound("cat") == 0.0


class TestRanking:
    """Test sort → truncate → positivity filter"""
    
    def test_all_negative_returns_empty(self, animal_documents):
        """Test the all-negative-idf scenario returns no results"""
        scorer = make_scorer(animal_documents)
        assert scorer.score(tokenize("cat fish"), animal_documents, top_k=10) == []
    
    def test_single_positive_result(self, parrot_documents):
        """Test only the 'parrot' document is returned with a positive score"""
        scorer = make_scorer(parrot_documents)
        results = scorer.score(tokenize("parrot"), parrot_documents, top_k=10)
        
        assert len(results) == 1
        document, score = results[0]
        assert document.id == 3
        assert score == pytest.approx(1.0965, abs=1e-3)
    
    def test_sorted_descending(self):
        """Test results are ordered best first"""
        documents = [
            Document("a", "rare"),
            Document("b", "rare rare filler filler filler filler"),
            Document("c", "rare rare rare"),
            Document("d", "other"),
            Document("e", "words"),
            Document("f", "here"),
            Document("g", "more"),
        ]
        scorer = make_scorer(documents)
        results = scorer.score(["rare"], documents, top_k=10)
        scores = [score for _, score in results]
        assert scores == sorted(scores, reverse=True)
        assert {doc.id for doc, _ in results} == {"a", "b", "c"}
    
    def test_ties_keep_insertion_order(self):
        """Test equal scores keep the order documents were given in"""
        documents = [
            Document("c", "alpha"),
            Document("b", "beta"),
            Document("a", "alpha"),
            Document("d", "gamma"),
            Document("e", "delta"),
        ]
        scorer = make_scorer(documents)
        results = scorer.score(["alpha"], documents, top_k=10)
        assert [doc.id for doc, _ in results] == ["c", "a"]
        assert results[0][1] == results[1][1]
    
    def test_truncate_then_filter_no_backfill(self):
        """Test non-positive scores inside the top_k window are dropped, not replaced"""
        documents = [
            Document(0, "alpha"),
            Document(1, "common x"),
            Document(2, "common y"),
            Document(3, "common z"),
            Document(4, "w"),
        ]
        scorer = make_scorer(documents)
        query = ["alpha", "common"]
        
        # Raw order: 0 (>0), 4 (=0), then 1..3 (<0)
        assert scorer.score_document(query, 0) > 0
        assert scorer.score_document(query, 4) == 0.0
        assert scorer.score_document(query, 1) < 0
        
        results = scorer.score(query, documents, top_k=3)
        assert [doc.id for doc, _ in results] == [0]
        assert len(results) < 3
    
    def test_truncation_limits_positive_results(self):
        """Test more positive documents than top_k returns exactly top_k"""
        documents = [Document(i, "rare " + "pad " * i) for i in range(3)]
        documents += [Document(i, f"other{i}") for i in range(3, 10)]
        scorer = make_scorer(documents)
        
        results = scorer.score(["rare"], documents, top_k=2)
        assert [doc.id for doc, _ in results] == [0, 1]
    
    def test_filter_before_truncate_option(self):
        """Test the alternative ordering returns the same positives here"""
        documents = [
            Document(0, "alpha"),
            Document(1, "common x"),
            Document(2, "common y"),
            Document(3, "common z"),
            Document(4, "alpha beta"),
        ]
        scorer = make_scorer(documents)
        query = ["alpha", "common"]
        
        default = scorer.score(query, documents, top_k=2)
        alternative = scorer.score(query, documents, top_k=2, filter_before_truncate=True)
        assert [d.id for d, _ in default] == [0, 4]
        assert [d.id for d, _ in alternative] == [0, 4]
    
    def test_empty_query_returns_empty(self, parrot_documents):
        """Test empty query: every score is 0, nothing survives the filter"""
        scorer = make_scorer(parrot_documents)
        assert scorer.score([], parrot_documents) == []
    
    def test_empty_corpus_returns_empty(self):
        """Test empty corpus returns empty list"""
        scorer = make_scorer([])
        assert scorer.score(["cat"], []) == []
    
    def test_non_positive_top_k(self, parrot_documents):
        """Test top_k <= 0 returns empty list"""
        scorer = make_scorer(parrot_documents)
        assert scorer.score(["parrot"], parrot_documents, top_k=0) == []
        assert scorer.score(["parrot"], parrot_documents, top_k=-1) == []
    
    def test_parallel_scoring_matches_sequential(self):
        """Test thread-pool scoring gives identical ranked output"""
        documents = [
            Document(i, " ".join(["rare"] * (i % 3) + ["word"] * (i % 5) + [f"t{i}"]))
            for i in range(40)
        ]
        statistics = CorpusStatistics(documents)
        sequential = BM25Scorer(statistics, max_workers=1)
        parallel = BM25Scorer(statistics, max_workers=4)
        
        query = ["rare", "word", "t7"]
        assert parallel.score(query, documents, top_k=15) == sequential.score(query, documents, top_k=15)
    
    def test_scoring_does_not_mutate_statistics(self, parrot_documents):
        """Test repeated scoring leaves statistics unchanged"""
        statistics = CorpusStatistics(parrot_documents)
        scorer = BM25Scorer(statistics)
        before = statistics.snapshot()
        
        first = scorer.score(["parrot", "cat"], parrot_documents)
        second = scorer.score(["parrot", "cat"], parrot_documents)
        
        assert first == second
        assert statistics.snapshot() == before
