"""
Upload operations to a batch job
"""
import asyncio
from adsbatch import AdsUser, BatchJobUtilities, Operation


UPLOAD_URL = "https://batchjob.example/upload-url-from-batch-job-service"


async def main():
    operations = [
        Operation(
            operator='ADD',
            operand={'name': 'Summer sale', 'status': 'PAUSED', 'budget': {'budgetId': '1001'}},
            xsi_type='CampaignOperation'
        ),
        Operation(
            operator='SET',
            operand={'id': '42', 'status': 'ENABLED'},
            xsi_type='CampaignOperation'
        ),
    ]
    
    async with AdsUser() as user:
        
        # Simple upload
        async with BatchJobUtilities(user) as utilities:
            url = await utilities.get_resumable_upload_url(UPLOAD_URL)
            await utilities.upload(url, operations)
            print(f"Uploaded {len(operations)} operations")
        
        # Chunked upload for unreliable networks (chunk size: multiple of 256 KB)
        async with BatchJobUtilities(user, use_chunking=True, chunk_size=512 * 1024) as utilities:
            url = await utilities.get_resumable_upload_url(UPLOAD_URL)
            try:
                await utilities.upload(url, operations)
            except Exception as e:
                print(f"Upload interrupted ({e}), resuming")
                await utilities.upload(url, operations, resume_previous_upload=True)
        
        print(f"Usage: {user.usage_registry.text()}")


if __name__ == "__main__":
    asyncio.run(main())
