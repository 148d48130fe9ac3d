"""
polyrep/backend/lrs.py

Communication interface for `lrs`, a package for vertex / facet enumeration.

More information about `lrs`: http://cgm.cs.mcgill.ca/~avis/C/lrs.html

`lrs` works in exact rational arithmetic and reads and writes tables of rows

    b  -a_1 ... -a_n        (H-representation: b - <a, x> >= 0)
    1   x_1 ...  x_n        (V-representation: a vertex)
    0   r_1 ...  r_n        (V-representation: a ray)

with a `linearity` line singling out the rows which are equalities (resp.
lines).
"""

from fractions import Fraction
from os import getenv
from subprocess import Popen, PIPE
from typing import List

from .backend_abc import Backend
from ..elements import HalfSpace, HyperPlane, Line, Point, Ray
from ..exceptions import NoFeasibleSolutions
from ..iterators import summand_points
from ..representation import DecomposedHRep, DecomposedVRep
from ..utilities import lcm, primitive_scale


LRS_ENV = "LRS_PATH"
"""Environment variable used to override the path to the `lrs` executable."""


LRS_PATH = getenv(LRS_ENV, "lrs")
"""Default path to the user's `lrs` executable."""


def check_for_lrs():
    """
    Checks whether `lrs` is findable and executable.
    """
    try:
        proc = Popen([LRS_PATH], stdin=PIPE, stdout=PIPE, stderr=PIPE)
        proc.communicate(b"")
        return True
    except OSError:  # FileNotFoundError, for instance
        return False


class LRSBackend(Backend):
    coefficient_type = Fraction

    def __init__(self):
        super().__init__()
        assert check_for_lrs(), "LRS not present."

    @staticmethod
    def hrep_to_vrep(hrep, chatty=False) -> DecomposedVRep:
        fulldim = hrep.fulldim
        hyperplanes = list(hrep.hyperplanes())
        halfspaces = list(hrep.halfspaces())
        if 0 == len(hyperplanes) + len(halfspaces):
            # lrs rejects empty tables; this is the whole space
            return DecomposedVRep(
                points=[Point((Fraction(0),) * fulldim)],
                lines=[Line(tuple(Fraction(int(i == j)) for j in range(fulldim)))
                       for i in range(fulldim)],
                fulldim=fulldim, coefficient_type=Fraction,
            )

        payload = encode_inequalities(
            [[h.beta, *[-a for a in h.a]] for h in halfspaces],
            [[h.beta, *[-a for a in h.a]] for h in hyperplanes],
        )
        response = single_lrs_pass(payload, chatty=chatty)
        decoded = decode_vertices(response)

        points, rays, lines = [], [], []
        for index, row in enumerate(decoded["vertices"]):
            if 1 + index in decoded["linearity"]:
                lines.append(Line(row[1:]))
            elif row[0] == 0:
                rays.append(Ray(row[1:]))
            else:
                points.append(Point([x / row[0] for x in row[1:]]))

        return DecomposedVRep(points, rays, lines, fulldim=fulldim,
                              coefficient_type=Fraction)

    @staticmethod
    def vrep_to_hrep(vrep, chatty=False) -> DecomposedHRep:
        fulldim = vrep.fulldim
        points = summand_points(vrep)
        if 0 == len(points):
            raise NoFeasibleSolutions()
        rays = list(vrep.rays())
        lines = list(vrep.lines())

        payload = encode_vertices(
            [[1, *p.coord] for p in points] +
            [[0, *r.coord] for r in rays] +
            [[0, *l.coord] for l in lines] +
            [[0, *[-x for x in l.coord]] for l in lines]
        )
        response = single_lrs_pass(payload, chatty=chatty)
        decoded = decode_inequalities(response)

        hyperplanes = [HyperPlane([-x for x in row[1:]], row[0])
                       for row in decoded["equalities"]]
        halfspaces = [HalfSpace([-x for x in row[1:]], row[0])
                      for row in decoded["inequalities"]
                      # lrs may echo the tautology 1 >= 0
                      if any(x != 0 for x in row[1:]) or row[0] < 0]

        return DecomposedHRep(hyperplanes, halfspaces, fulldim=fulldim,
                              coefficient_type=Fraction)

    @staticmethod
    def detect_hlinearities(hrep, chatty=False):
        # NOTE: The round trip through the V-representation also replaces the
        #       halfspaces by an irredundant family describing the same set.
        vrep = LRSBackend.hrep_to_vrep(hrep, chatty=chatty)
        reduced = LRSBackend.vrep_to_hrep(vrep, chatty=chatty)
        return list(reduced.hyperplanes()), list(reduced.halfspaces())

    @staticmethod
    def detect_vlinearities(vrep, chatty=False):
        hrep = LRSBackend.vrep_to_hrep(vrep, chatty=chatty)
        reduced = LRSBackend.hrep_to_vrep(hrep, chatty=chatty)
        return (list(reduced.points()), list(reduced.rays()),
                list(reduced.lines()))


def single_lrs_pass(payload: bytes, chatty=False) -> bytes:
    """Generic wrapper for lrs."""
    if chatty:
        print("=== LRS CALL ===")
        print("Payload:")
        print(payload.decode())
    proc = Popen([LRS_PATH], stdin=PIPE, stdout=PIPE, stderr=PIPE)
    stdout, stderr = proc.communicate(payload)
    # TODO: Surface stderr, once lrs's chatter about restarting with another
    #       arithmetic type can be told apart from real failures.
    if chatty:
        print("Response:")
        print(stdout.decode())
    return stdout


def _integral_row(row) -> List[int]:
    scale = primitive_scale(row)
    return [int(Fraction(x) * scale) for x in row]


def encode_inequalities(inequalities, equalities=None, name="name",
                        options=None) -> bytes:
    """Format `inequalities` for consumption by lrs."""
    equalities = equalities if equalities is not None else []
    options = options if options is not None else []
    rows = inequalities + equalities + [[-x for x in eq] for eq in equalities]
    output = ""
    output += name + "\n"
    output += "H-representation\n"
    output += "begin\n"
    output += f"{len(rows)} {len(rows[0])} rational\n"
    for row in rows:
        output += " ".join([str(x) for x in _integral_row(row)]) + "\n"
    output += "end\n"
    for option in options:
        output += f"{option}\n"

    return output.encode()


def encode_vertices(vertices, name="name", options=None) -> bytes:
    """Format `vertices` (and rays, with leading 0) for consumption by lrs."""
    options = [] if options is None else options
    output = ""
    output += name + "\n"
    output += "V-representation\n"
    output += "begin\n"
    output += f"{len(vertices)} {len(vertices[0])} rational\n"
    for vertex in vertices:
        output += " ".join([str(Fraction(x)) for x in vertex]) + "\n"
    output += "end\n"
    for option in options:
        output += f"{option}\n"

    return output.encode()


def _parse_table(lrs_output: bytes, expected: str, unexpected: str):
    """
    Reads the rows and the linearity indices of the table in `lrs_output`.
    """
    rows = []
    linearity = []
    name = None
    invocation_signature = None
    seen_end = False
    for line in lrs_output.decode('utf-8').splitlines():
        line = line.strip()
        # initialize
        if line.startswith('*lrs') and line != invocation_signature:
            name = None
            invocation_signature = line
        # ignore comments
        if line.startswith('*') or line == '':
            continue
        if line.startswith("No feasible solution"):
            raise NoFeasibleSolutions()
        # first non-comment line is our name
        if name is None:
            name = line
            continue
        # ignore begin / end, assume they're in the right place
        if line.startswith('end'):
            seen_end = True
            continue
        if line.startswith('begin'):
            rows = []
            continue
        # skip the table size, if it's present
        if 'rational' in line:
            continue
        # check that we're looking at the right kind of representation
        if line == expected:
            continue
        if line == unexpected:
            raise ValueError(f"Decoder for an {expected} table got an "
                             f"{unexpected} table as input.")
        if line.startswith('linearity'):
            linearity = [int(x) for x in line[9:].split()[1:]]
            continue

        rows.append([Fraction(x) for x in line.split()])

    if 0 == len(rows) and not seen_end:
        print(lrs_output.decode('utf-8'))
        raise TypeError("Something bad happened in `lrs`.")

    return rows, linearity


def decode_inequalities(lrs_output: bytes):
    """Parse lrs output (an `H-representation`) into python data."""
    rows, linearity = _parse_table(lrs_output, "H-representation",
                                   "V-representation")

    integral_rows = []
    for row in rows:
        row_lcm = abs(lcm(*[x.denominator for x in row]))
        integral_rows.append([int(x * row_lcm) for x in row])

    return dict(
        inequalities=[row for index, row in enumerate(integral_rows)
                      if 1 + index not in linearity],
        equalities=[row for index, row in enumerate(integral_rows)
                    if 1 + index in linearity],
    )


def decode_vertices(lrs_output: bytes):
    """Parse lrs output (a `V-representation`) into python data."""
    rows, linearity = _parse_table(lrs_output, "V-representation",
                                   "H-representation")
    return dict(vertices=rows, linearity=linearity)
