# This source code is part of the Seqalign package and is distributed
# under the 3-Clause BSD License. Please see 'LICENSE.rst' for further
# information.

__name__ = "seqalign"
__author__ = "Seqalign contributors"
__all__ = ["Copyable"]

import abc


class Copyable(metaclass=abc.ABCMeta):
    """
    Base class for objects that create modified duplicates of
    themselves instead of being changed in place.

    :meth:`copy()` first obtains a bare instance of the same class via
    :meth:`__copy_create__()`.
    Afterwards :meth:`__copy_fill__()` is called along the class
    hierarchy, from the uppermost base class down to the class of the
    copied object, so that each class transfers the state it owns.

    Since :class:`seqalign.sequence.Sequence` objects are immutable,
    this is the only way to derive a new sequence (e.g. a reversed or
    complementary one) from an existing one.
    """

    def copy(self):
        """
        Copy the object.

        Returns
        -------
        copy
            A copy of this object.
        """
        clone = self.__copy_create__()
        self.__copy_fill__(clone)
        return clone

    def __copy_create__(self):
        """
        Instantiate a bare object of the same class.

        Only the constructor should be called here, every other
        attribute is transferred in :meth:`__copy_fill__()`.
        Override this method if the constructor requires parameters.

        Returns
        -------
        copy
            A freshly instantiated object of the class of *self*.
        """
        return type(self)()

    def __copy_fill__(self, clone):
        """
        Transfer the attributes owned by this class to `clone`.

        Overriding methods call the `super()` method first.

        Parameters
        ----------
        clone
            The freshly instantiated copy of *self*.
        """
        pass
