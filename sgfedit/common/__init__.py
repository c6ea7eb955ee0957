# sgfedit/common - stable shared helpers
#
# Referenced from sgfedit.core; holds config access and list utilities.
# Nothing here keeps editor state.
