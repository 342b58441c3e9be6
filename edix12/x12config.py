"""
edix12 constants: envelope tags, sections, parser states and tree keys.
"""

# default delimiters
TERMINATOR = '~'
SEPARATOR = '*'

# envelope segment tags
ISA = 'ISA'
IEA = 'IEA'
GS = 'GS'
GE = 'GE'
ST = 'ST'
SE = 'SE'
ENVELOPE_TAGS = (ISA, GS, ST, SE, GE, IEA)

# sections of a transaction set, in emission order
HEADER = 'header'
DETAIL = 'detail'
FOOTER = 'footer'
SECTIONS = (HEADER, DETAIL, FOOTER)

# keys of a field definition in the schema document
NAME = 'name'
VALUE = 'value'
BYTES = 'bytes'
MIN = 'min'
MAX = 'max'
FORMAT = 'format'
TYPE = 'type'
FIELDKEYS = (NAME, VALUE, BYTES, MIN, MAX, FORMAT, TYPE)

# keys of a document in the schema document
SEGMENTS = 'segments'
STRUCTURE = 'structure'
DEFINITION = 'definition'

# parser states; each one nests inside the previous
OUTSIDE = 0
IN_INTERCHANGE = 1
IN_GROUP = 2
IN_SET = 3
STATENAMES = {
    OUTSIDE: 'OUTSIDE',
    IN_INTERCHANGE: 'IN_INTERCHANGE',
    IN_GROUP: 'IN_GROUP',
    IN_SET: 'IN_SET',
}

# keys of the nested-dict form of a record tree
TREE_ISA = 'ISA'
TREE_GROUPS = 'GROUPS'
TREE_SETS = 'SETS'
TREE_HEADER = 'HEADER'
TREE_DETAIL = 'DETAIL'
TREE_FOOTER = 'FOOTER'

# field names used by the envelope segments
IDENTIFIER_CODE = 'identifier_code'
CONTROL_NUMBER = 'control_number'
TOTAL = 'total'
