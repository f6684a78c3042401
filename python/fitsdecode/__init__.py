# This file is part of fits-decode.
#
# See the COPYRIGHT file at the top-level directory of this distribution
# for details of code ownership.
#
# Use of this source code is governed by a 3-clause BSD-style
# license that can be found in the LICENSE file.

"""A decoder for the Flexible Image Transport System (FITS) file format.

A FITS file is a sequence of Header Data Units (HDUs).  Each header is a
run of 80-byte ASCII cards terminated by ``END`` and padded to a multiple of
2880 bytes; the data segment that follows it has a size computed from the
header's ``BITPIX`` and ``NAXISn`` keywords and is padded the same way.

`decode` turns a complete in-memory file into a `Fits` object holding the
primary `HDU` and any extensions, with each header parsed into typed
`KeywordRecord` objects.  Data segments are kept as raw bytes; `HDU.as_array`
views simple image data as a numpy array.
"""

from ._cards import *
from ._errors import *
from ._fits import *
from ._hdu import *
from ._header import *
from ._keywords import *
from ._options import *
from ._records import *
from ._summary import *
from ._values import *
