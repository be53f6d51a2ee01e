import pytest
import seqalign.sequence as seq
import seqalign.sequence.align as align


@pytest.mark.parametrize("mode", list(align.AlignmentType))
@pytest.mark.benchmark
def benchmark_align_pairwise(related_sequences, mode):
    align.align_pairwise(*related_sequences, align.BLAST_DNA, mode)


@pytest.mark.benchmark
def benchmark_align_anchored(related_sequences):
    align.align_anchored(*related_sequences, align.BLAST_DNA, min_anchor_length=12)


@pytest.mark.benchmark
def benchmark_align_multiple(related_sequences):
    seq1, seq2 = related_sequences
    align.align_multiple([seq1, seq2, seq1[::2], seq2[1::2]], max_workers=4)


@pytest.mark.benchmark
def benchmark_suffix_tree(related_sequences):
    tree = seq.SuffixTree(related_sequences[0])
    tree.longest_common_substring(related_sequences[1])
