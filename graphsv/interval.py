

class Interval:
    """
    half-open genomic interval [start, end) on a named contig
    """

    def __init__(self, contig, start, end):
        """
        Args:
            contig (str): the name of the contig/chromosome
            start (int): the start of the interval (inclusive)
            end (int): the end of the interval (exclusive)
        """
        if contig is None:
            raise TypeError('interval contig cannot be None')
        self.contig = str(contig)
        self.start = int(start)
        self.end = int(end)
        if self.start > self.end:
            raise AttributeError('interval start > end is not allowed', self.start, self.end)

    def length(self):
        """
        Example:
            >>> Interval('1', 10, 20).length()
            10
        """
        return self.end - self.start

    def __len__(self):
        return self.length()

    def overlaps(self, other):
        """
        checks if two intervals on the same contig have any positions in common

        Example:
            >>> Interval('1', 1, 5).overlaps(Interval('1', 5, 7))
            False
            >>> Interval('1', 1, 10).overlaps(Interval('1', 9, 11))
            True
        """
        return self.contig == other.contig and self.start < other.end and other.start < self.end

    def overlap_length(self, other):
        """
        the number of positions two intervals have in common (0 if they do not overlap)

        Example:
            >>> Interval('1', 0, 10).overlap_length(Interval('1', 5, 50))
            5
        """
        if not self.overlaps(other):
            return 0
        return min(self.end, other.end) - max(self.start, other.start)

    def reciprocal_overlap(self, other, fraction):
        """
        True if the intervals overlap and the overlap covers at least the given fraction of each interval

        Example:
            >>> Interval('1', 0, 10).reciprocal_overlap(Interval('1', 1, 11), 0.9)
            True
            >>> Interval('1', 0, 10).reciprocal_overlap(Interval('1', 5, 100), 0.1)
            False
        """
        overlap = self.overlap_length(other)
        if overlap == 0:
            return False
        return overlap >= fraction * self.length() and overlap >= fraction * other.length()

    def contains(self, other):
        """
        True if the other interval lies entirely within this one

        Example:
            >>> Interval('1', 0, 10).contains(Interval('1', 2, 10))
            True
        """
        return self.contig == other.contig and self.start <= other.start and other.end <= self.end

    def union(self, other):
        """
        the smallest interval spanning both intervals

        Raises:
            ValueError: if the intervals are on different contigs
        """
        if self.contig != other.contig:
            raise ValueError('cannot compute the union of intervals on different contigs', self, other)
        return Interval(self.contig, min(self.start, other.start), max(self.end, other.end))

    def key(self):
        return (self.contig, self.start, self.end)

    def __eq__(self, other):
        if not isinstance(other, Interval):
            return NotImplemented
        return self.key() == other.key()

    def __hash__(self):
        return hash(self.key())

    def __lt__(self, other):
        return self.key() < other.key()

    def __le__(self, other):
        return self.key() <= other.key()

    def __repr__(self):
        return '{}({}:{}-{})'.format(self.__class__.__name__, self.contig, self.start, self.end)
