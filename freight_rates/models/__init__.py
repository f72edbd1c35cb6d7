from .commission import CommissionRecordRow
